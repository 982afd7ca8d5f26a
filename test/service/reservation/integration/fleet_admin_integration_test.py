from datetime import date, time
from decimal import Decimal

import pytest

from bus_reservation.platform.exception.exceptions import (
    BusNotFoundError,
    ConflictError,
    InvalidInputError,
    RouteNotFoundError,
)
from bus_reservation.service.reservation.app.query.fleet_query_use_case import (
    FleetQueryUseCase,
)
from bus_reservation.service.reservation.domain.enum.bus_category import BusCategory
from bus_reservation.service.reservation.domain.enum.bus_status import BusStatus
from bus_reservation.service.reservation.domain.enum.day_of_week import DayOfWeek
from test.test_constants import TRAVEL_DATE


@pytest.fixture
def fleet_query(uow_factory) -> FleetQueryUseCase:
    return FleetQueryUseCase(uow_factory=uow_factory)


async def _book_seat(coordinator, *, user, trip):
    return await coordinator.reserve(
        user_id=user.id,
        bus_id=trip['bus'].id,
        schedule_id=trip['schedule'].id,
        seat_number=1,
        passenger_name=user.full_name,
        passenger_phone='0912345678',
        travel_date=TRAVEL_DATE,
    )


@pytest.mark.integration
class TestBusAdmin:
    @pytest.mark.asyncio
    async def test_create_and_read_back(self, fleet_admin, fleet_query):
        bus = await fleet_admin.create_bus(
            bus_number=' KA-09-1234 ',
            name='Night Rider',
            category=BusCategory.LUXURY,
            total_seats=30,
            base_fare=Decimal('12.50'),
        )

        stored = await fleet_query.get_bus(bus_id=bus.id)
        assert stored.bus_number == 'KA-09-1234'
        assert stored.category is BusCategory.LUXURY
        assert stored.base_fare == Decimal('12.50')
        assert stored.status is BusStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_duplicate_bus_number(self, fleet_admin, make_trip):
        await make_trip(bus_number='KA-01-0001')

        with pytest.raises(ConflictError):
            await fleet_admin.create_bus(
                bus_number='KA-01-0001',
                name='Copy',
                category=BusCategory.STANDARD,
                total_seats=10,
                base_fare=Decimal('10.00'),
            )

    @pytest.mark.asyncio
    async def test_total_seats_cannot_change(self, fleet_admin, make_trip):
        trip = await make_trip()

        with pytest.raises(InvalidInputError):
            await fleet_admin.update_bus(bus_id=trip['bus'].id, total_seats=40)

    @pytest.mark.asyncio
    async def test_maintenance_bus_is_hidden_from_active_listing(
        self, fleet_admin, fleet_query, make_trip
    ):
        trip = await make_trip()

        await fleet_admin.update_bus(bus_id=trip['bus'].id, status=BusStatus.MAINTENANCE)

        assert await fleet_query.list_buses(active_only=True) == []
        assert len(await fleet_query.list_buses()) == 1
        assert await fleet_query.list_schedules(active_only=True) == []

    @pytest.mark.asyncio
    async def test_delete_refused_while_bookings_are_confirmed(
        self, fleet_admin, coordinator, customers, make_trip
    ):
        trip = await make_trip()
        await _book_seat(coordinator, user=customers['alice'], trip=trip)

        with pytest.raises(ConflictError):
            await fleet_admin.delete_bus(bus_id=trip['bus'].id)

    @pytest.mark.asyncio
    async def test_delete_removes_schedules_once_bookings_are_gone(
        self, fleet_admin, fleet_query, coordinator, customers, make_trip
    ):
        trip = await make_trip()
        alice = customers['alice']
        booking = await _book_seat(coordinator, user=alice, trip=trip)
        await coordinator.cancel(booking_id=booking.id, requesting_user_id=alice.id)

        await fleet_admin.delete_bus(bus_id=trip['bus'].id)

        with pytest.raises(BusNotFoundError):
            await fleet_query.get_bus(bus_id=trip['bus'].id)
        assert await fleet_query.list_schedules() == []


@pytest.mark.integration
class TestRouteAndScheduleAdmin:
    @pytest.mark.asyncio
    async def test_route_in_use_cannot_be_deleted(self, fleet_admin, make_trip):
        trip = await make_trip()

        with pytest.raises(ConflictError):
            await fleet_admin.delete_route(route_id=trip['route'].id)

    @pytest.mark.asyncio
    async def test_unused_route_can_be_deleted(self, fleet_admin, fleet_query):
        route = await fleet_admin.create_route(
            source='Chennai',
            destination='Pondicherry',
            distance_km=Decimal('150'),
            duration_minutes=200,
        )

        await fleet_admin.delete_route(route_id=route.id)

        with pytest.raises(RouteNotFoundError):
            await fleet_query.get_route(route_id=route.id)

    @pytest.mark.asyncio
    async def test_schedule_for_unknown_route(self, fleet_admin, make_trip):
        trip = await make_trip()

        with pytest.raises(RouteNotFoundError):
            await fleet_admin.create_schedule(
                bus_id=trip['bus'].id,
                route_id=999,
                departure_time=time(9),
                arrival_time=time(12),
                day_of_week=DayOfWeek.MONDAY,
            )

    @pytest.mark.asyncio
    async def test_schedule_with_confirmed_bookings_cannot_be_deleted(
        self, fleet_admin, coordinator, customers, make_trip
    ):
        trip = await make_trip()
        await _book_seat(coordinator, user=customers['alice'], trip=trip)

        with pytest.raises(ConflictError):
            await fleet_admin.delete_schedule(schedule_id=trip['schedule'].id)

    @pytest.mark.asyncio
    async def test_reschedule_to_weekly(self, fleet_admin, fleet_query, make_trip):
        trip = await make_trip()

        await fleet_admin.update_schedule(
            schedule_id=trip['schedule'].id, day_of_week=DayOfWeek.SATURDAY
        )

        stored = await fleet_query.get_schedule(schedule_id=trip['schedule'].id)
        assert stored.day_of_week is DayOfWeek.SATURDAY
        assert stored.service_date is None
        assert stored.runs_on(date(2024, 6, 8))

    @pytest.mark.asyncio
    async def test_schedules_by_bus_are_ordered_by_departure(
        self, fleet_admin, fleet_query, make_trip
    ):
        trip = await make_trip()
        await fleet_admin.create_schedule(
            bus_id=trip['bus'].id,
            route_id=trip['route'].id,
            departure_time=time(6),
            arrival_time=time(9),
            day_of_week=DayOfWeek.SUNDAY,
        )

        schedules = await fleet_query.list_schedules_by_bus(bus_id=trip['bus'].id)

        assert [s.departure_time for s in schedules] == [time(6), time(8)]
