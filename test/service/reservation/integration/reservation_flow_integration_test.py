"""
Reservation flow against a real SQLite database

Covers the coordinator end to end: Seat Inventory and Booking Ledger stay consistent
(a seat is Occupied exactly when a Confirmed booking points at it) across reserve,
cancel, concurrent attempts and the compensation path.
"""

import asyncio
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest

from bus_reservation.platform.exception.exceptions import (
    AlreadyCancelledError,
    BusNotFoundError,
    NotOwnerError,
    SeatOutOfRangeError,
    SeatUnavailableError,
)
from bus_reservation.service.reservation.domain.enum.booking_status import BookingStatus
from bus_reservation.service.reservation.domain.enum.bus_category import BusCategory
from bus_reservation.service.reservation.domain.enum.seat_status import SeatStatus
from bus_reservation.service.reservation.driven_adapter.repo.seat_inventory_impl import (
    SeatInventoryImpl,
)
from test.test_constants import TRAVEL_DATE


async def _reserve(coordinator, *, user, trip, seat_number=2, travel_date=TRAVEL_DATE):
    return await coordinator.reserve(
        user_id=user.id,
        bus_id=trip['bus'].id,
        schedule_id=trip['schedule'].id,
        seat_number=seat_number,
        passenger_name=user.full_name,
        passenger_phone='0912345678',
        travel_date=travel_date,
    )


async def _assert_ledger_matches_inventory(uow_factory, *, bus_id: int, travel_date: date):
    async with uow_factory() as uow:
        confirmed = await uow.booking_ledger.find_confirmed(bus_id=bus_id, travel_date=travel_date)
        layout = await uow.seat_inventory.seat_layout(bus_id=bus_id, travel_date=travel_date)

    occupied = {
        seat.seat_number: seat.booking_id
        for seat in layout.seats
        if seat.status is SeatStatus.OCCUPIED
    }
    assert occupied == {booking.seat_number: booking.id for booking in confirmed}


@pytest.mark.integration
class TestReserve:
    @pytest.mark.asyncio
    async def test_reserve_confirms_booking_and_occupies_seat(
        self, coordinator, seat_query, customers, make_trip, uow_factory
    ):
        trip = await make_trip()
        alice = customers['alice']

        booking = await _reserve(coordinator, user=alice, trip=trip)

        assert booking.status is BookingStatus.CONFIRMED
        assert booking.fare == Decimal('10.00')
        assert booking.seat_number == 2
        assert booking.user_id == alice.id
        assert await seat_query.available_count(bus_id=trip['bus'].id, travel_date=TRAVEL_DATE) == 2
        assert not await seat_query.is_available(
            bus_id=trip['bus'].id, seat_number=2, travel_date=TRAVEL_DATE
        )
        await _assert_ledger_matches_inventory(
            uow_factory, bus_id=trip['bus'].id, travel_date=TRAVEL_DATE
        )

    @pytest.mark.asyncio
    async def test_second_reservation_for_same_seat_is_rejected(
        self, coordinator, seat_query, customers, make_trip, booking_query
    ):
        trip = await make_trip()
        await _reserve(coordinator, user=customers['alice'], trip=trip)

        with pytest.raises(SeatUnavailableError):
            await _reserve(coordinator, user=customers['bob'], trip=trip)

        assert await seat_query.available_count(bus_id=trip['bus'].id, travel_date=TRAVEL_DATE) == 2
        assert await booking_query.find_by_user(user_id=customers['bob'].id) == []

    @pytest.mark.asyncio
    async def test_same_seat_on_another_date_is_independent(
        self, coordinator, customers, make_trip, fleet_admin
    ):
        trip = await make_trip()
        other_date = date(2024, 6, 2)
        other_schedule = await fleet_admin.create_schedule(
            bus_id=trip['bus'].id,
            route_id=trip['route'].id,
            departure_time=trip['schedule'].departure_time,
            arrival_time=trip['schedule'].arrival_time,
            service_date=other_date,
        )
        await _reserve(coordinator, user=customers['alice'], trip=trip)

        booking = await coordinator.reserve(
            user_id=customers['bob'].id,
            bus_id=trip['bus'].id,
            schedule_id=other_schedule.id,
            seat_number=2,
            passenger_name='Bob Lin',
            passenger_phone='0987654321',
            travel_date=other_date,
        )

        assert booking.travel_date == other_date

    @pytest.mark.asyncio
    async def test_luxury_fare_uses_category_and_route_multipliers(
        self, coordinator, customers, make_trip
    ):
        trip = await make_trip(
            category=BusCategory.LUXURY,
            base_fare=Decimal('20.00'),
            fare_multiplier=Decimal('1.2'),
        )

        booking = await _reserve(coordinator, user=customers['alice'], trip=trip)

        assert booking.fare == Decimal('36.00')

    @pytest.mark.asyncio
    async def test_seat_outside_bus_capacity(self, coordinator, customers, make_trip):
        trip = await make_trip()

        with pytest.raises(SeatOutOfRangeError):
            await _reserve(coordinator, user=customers['alice'], trip=trip, seat_number=4)

    @pytest.mark.asyncio
    async def test_unknown_bus(self, coordinator, customers, make_trip):
        trip = await make_trip()
        trip['bus'].id = 999

        with pytest.raises(BusNotFoundError):
            await _reserve(coordinator, user=customers['alice'], trip=trip)

    @pytest.mark.asyncio
    async def test_concurrent_requests_for_one_seat_produce_one_booking(
        self, coordinator, seat_query, customers, make_trip, uow_factory
    ):
        trip = await make_trip()
        users = [customers['alice'], customers['bob']] * 4

        results = await asyncio.gather(
            *(_reserve(coordinator, user=user, trip=trip) for user in users),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, BaseException)]
        failures = [r for r in results if isinstance(r, BaseException)]
        assert len(successes) == 1
        assert all(isinstance(f, SeatUnavailableError) for f in failures)
        assert await seat_query.available_count(bus_id=trip['bus'].id, travel_date=TRAVEL_DATE) == 2
        await _assert_ledger_matches_inventory(
            uow_factory, bus_id=trip['bus'].id, travel_date=TRAVEL_DATE
        )

    @pytest.mark.asyncio
    async def test_concurrent_requests_for_different_seats_all_succeed(
        self, coordinator, seat_query, customers, make_trip
    ):
        trip = await make_trip()

        bookings = await asyncio.gather(
            *(
                _reserve(coordinator, user=customers['alice'], trip=trip, seat_number=seat)
                for seat in (1, 2, 3)
            )
        )

        assert sorted(b.seat_number for b in bookings) == [1, 2, 3]
        assert await seat_query.available_count(bus_id=trip['bus'].id, travel_date=TRAVEL_DATE) == 0

    @pytest.mark.asyncio
    async def test_lost_seat_write_leaves_no_booking_behind(
        self, coordinator, customers, make_trip, booking_query, uow_factory
    ):
        trip = await make_trip()
        first = await _reserve(coordinator, user=customers['alice'], trip=trip)

        # Availability check passes, the occupancy insert still loses
        with patch.object(SeatInventoryImpl, 'is_available', AsyncMock(return_value=True)):
            with pytest.raises(SeatUnavailableError):
                await _reserve(coordinator, user=customers['bob'], trip=trip)

        assert await booking_query.find_by_user(user_id=customers['bob'].id) == []
        bus_bookings = await booking_query.find_by_bus(bus_id=trip['bus'].id)
        assert [b.id for b in bus_bookings] == [first.id]
        assert [b.id for b in await booking_query.list_all()] == [first.id]
        await _assert_ledger_matches_inventory(
            uow_factory, bus_id=trip['bus'].id, travel_date=TRAVEL_DATE
        )


@pytest.mark.integration
class TestCancel:
    @pytest.mark.asyncio
    async def test_cancel_frees_seat_for_new_booking(
        self, coordinator, seat_query, customers, make_trip
    ):
        trip = await make_trip()
        alice = customers['alice']
        first = await _reserve(coordinator, user=alice, trip=trip)

        cancelled = await coordinator.cancel(booking_id=first.id, requesting_user_id=alice.id)

        assert cancelled.status is BookingStatus.CANCELLED
        assert await seat_query.available_count(bus_id=trip['bus'].id, travel_date=TRAVEL_DATE) == 3

        second = await _reserve(coordinator, user=customers['bob'], trip=trip)
        assert second.id != first.id
        assert second.seat_number == first.seat_number

    @pytest.mark.asyncio
    async def test_cancel_by_other_customer_changes_nothing(
        self, coordinator, seat_query, booking_query, customers, make_trip
    ):
        trip = await make_trip()
        booking = await _reserve(coordinator, user=customers['alice'], trip=trip)

        with pytest.raises(NotOwnerError):
            await coordinator.cancel(booking_id=booking.id, requesting_user_id=customers['bob'].id)

        stored = await booking_query.get(booking_id=booking.id, requester=customers['alice'])
        assert stored.status is BookingStatus.CONFIRMED
        assert await seat_query.available_count(bus_id=trip['bus'].id, travel_date=TRAVEL_DATE) == 2

    @pytest.mark.asyncio
    async def test_cancel_twice_leaves_seat_with_new_owner(
        self, coordinator, seat_query, booking_query, customers, make_trip, uow_factory
    ):
        trip = await make_trip()
        alice, bob = customers['alice'], customers['bob']
        booking = await _reserve(coordinator, user=alice, trip=trip)
        await coordinator.cancel(booking_id=booking.id, requesting_user_id=alice.id)
        rebooked = await _reserve(coordinator, user=bob, trip=trip)
        count_before = await seat_query.available_count(
            bus_id=trip['bus'].id, travel_date=TRAVEL_DATE
        )

        with pytest.raises(AlreadyCancelledError):
            await coordinator.cancel(booking_id=booking.id, requesting_user_id=alice.id)

        assert (
            await seat_query.available_count(bus_id=trip['bus'].id, travel_date=TRAVEL_DATE)
            == count_before
            == 2
        )
        assert not await seat_query.is_available(
            bus_id=trip['bus'].id, seat_number=2, travel_date=TRAVEL_DATE
        )
        stored = await booking_query.get(booking_id=rebooked.id, requester=bob)
        assert stored.status is BookingStatus.CONFIRMED
        await _assert_ledger_matches_inventory(
            uow_factory, bus_id=trip['bus'].id, travel_date=TRAVEL_DATE
        )

    @pytest.mark.asyncio
    async def test_list_all_includes_cancelled_most_recent_first(
        self, coordinator, booking_query, customers, make_trip
    ):
        trip = await make_trip()
        alice, bob = customers['alice'], customers['bob']
        older = await _reserve(coordinator, user=alice, trip=trip, seat_number=1)
        newer = await _reserve(coordinator, user=bob, trip=trip, seat_number=3)
        await coordinator.cancel(booking_id=older.id, requesting_user_id=alice.id)

        listed = await booking_query.list_all()

        assert [b.id for b in listed] == [newer.id, older.id]
        assert [b.status for b in listed] == [BookingStatus.CONFIRMED, BookingStatus.CANCELLED]

    @pytest.mark.asyncio
    async def test_update_passenger_keeps_seat(self, coordinator, seat_query, customers, make_trip):
        trip = await make_trip()
        alice = customers['alice']
        booking = await _reserve(coordinator, user=alice, trip=trip)

        updated = await coordinator.update_passenger(
            booking_id=booking.id,
            requesting_user_id=alice.id,
            passenger_name='  Alice Wang ',
            passenger_phone='0911111111',
        )

        assert updated.passenger_name == 'Alice Wang'
        assert updated.seat_number == booking.seat_number
        assert not await seat_query.is_available(
            bus_id=trip['bus'].id, seat_number=2, travel_date=TRAVEL_DATE
        )


@pytest.mark.integration
class TestMaintenance:
    @pytest.mark.asyncio
    async def test_complete_departed_frees_past_seats(
        self, coordinator, seat_query, booking_query, customers, make_trip
    ):
        trip = await make_trip()
        alice = customers['alice']
        booking = await _reserve(coordinator, user=alice, trip=trip)

        completed = await coordinator.complete_departed(today=date(2024, 6, 2))

        assert [b.id for b in completed] == [booking.id]
        stored = await booking_query.get(booking_id=booking.id, requester=alice)
        assert stored.status is BookingStatus.COMPLETED
        assert await seat_query.available_count(bus_id=trip['bus'].id, travel_date=TRAVEL_DATE) == 3

    @pytest.mark.asyncio
    async def test_complete_departed_ignores_today(self, coordinator, customers, make_trip):
        trip = await make_trip()
        await _reserve(coordinator, user=customers['alice'], trip=trip)

        assert await coordinator.complete_departed(today=TRAVEL_DATE) == []

    @pytest.mark.asyncio
    async def test_resync_restores_missing_occupancy(
        self, coordinator, seat_query, customers, make_trip, uow_factory
    ):
        trip = await make_trip()
        booking = await _reserve(coordinator, user=customers['alice'], trip=trip)
        async with uow_factory() as uow:
            await uow.seat_inventory.release(
                bus_id=trip['bus'].id, seat_number=booking.seat_number, travel_date=TRAVEL_DATE
            )
            await uow.commit()

        changed = await coordinator.resync_inventory(bus_id=trip['bus'].id, travel_date=TRAVEL_DATE)

        assert changed == 1
        assert await seat_query.available_count(bus_id=trip['bus'].id, travel_date=TRAVEL_DATE) == 2
        await _assert_ledger_matches_inventory(
            uow_factory, bus_id=trip['bus'].id, travel_date=TRAVEL_DATE
        )

    @pytest.mark.asyncio
    async def test_resync_on_consistent_inventory_changes_nothing(
        self, coordinator, customers, make_trip
    ):
        trip = await make_trip()
        await _reserve(coordinator, user=customers['alice'], trip=trip)

        assert await coordinator.resync_inventory(bus_id=trip['bus'].id, travel_date=TRAVEL_DATE) == 0
