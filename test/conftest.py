"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module reads settings
- A fresh SQLite database file per test (integration and API tests)
- Wired use cases over that database
- A TestClient running the app with the test lifespan

Architecture:
- Unit tests (test/**/unit/): mock the unit of work; never touch the database
- Integration tests: real SQLAlchemy adapters against a temporary SQLite file
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # Cheap hashing and short waits keep the suite fast
    os.environ.setdefault('BCRYPT_ROUNDS', '4')
    os.environ.setdefault('SEAT_LOCK_TIMEOUT_SECONDS', '2.0')
    os.environ.setdefault('RESERVATION_RETRY_BACKOFF_SECONDS', '0.01')
    os.environ.setdefault('SQLITE_BUSY_TIMEOUT_SECONDS', '10')


_early_setup_test_environment()

from collections.abc import AsyncGenerator, Callable, Generator  # noqa: E402
from datetime import date, time  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any  # noqa: E402

from dependency_injector import providers  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from bus_reservation.platform.config.di import container  # noqa: E402
from bus_reservation.platform.database.orm_db_setting import Database  # noqa: E402
from bus_reservation.platform.database.unit_of_work import (  # noqa: E402
    AbstractUnitOfWork,
    SqlAlchemyUnitOfWork,
)
from bus_reservation.platform.state.seat_lock import SeatLock  # noqa: E402
from bus_reservation.service.reservation.app.command.fleet_admin_use_case import (  # noqa: E402
    FleetAdminUseCase,
)
from bus_reservation.service.reservation.app.command.reservation_coordinator import (  # noqa: E402
    ReservationCoordinator,
)
from bus_reservation.service.reservation.app.command.user_account_use_case import (  # noqa: E402
    UserAccountUseCase,
)
from bus_reservation.service.reservation.app.query.booking_query_use_case import (  # noqa: E402
    BookingQueryUseCase,
)
from bus_reservation.service.reservation.app.query.seat_query_use_case import (  # noqa: E402
    SeatQueryUseCase,
)
from bus_reservation.service.reservation.domain.enum.bus_category import BusCategory  # noqa: E402
from bus_reservation.service.reservation.driven_adapter.security.bcrypt_password_hasher import (  # noqa: E402
    BcryptPasswordHasher,
)
from test.test_constants import (  # noqa: E402
    ANOTHER_CUSTOMER_USERNAME,
    DEFAULT_PASSWORD,
    TEST_CUSTOMER_USERNAME,
    TRAVEL_DATE,
)


# =============================================================================
# Database Fixtures
# =============================================================================
@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    db = Database(database_url=f'sqlite+aiosqlite:///{tmp_path / "reservation_test.db"}')
    await db.create_db_and_tables()
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database: Database) -> Callable[[], AbstractUnitOfWork]:
    return lambda: SqlAlchemyUnitOfWork(session_factory=database.new_session)


@pytest.fixture
def seat_lock() -> SeatLock:
    return SeatLock(timeout=2.0)


# =============================================================================
# Use Case Fixtures
# =============================================================================
@pytest.fixture
def coordinator(
    uow_factory: Callable[[], AbstractUnitOfWork], seat_lock: SeatLock
) -> ReservationCoordinator:
    return ReservationCoordinator(
        uow_factory=uow_factory, seat_lock=seat_lock, max_retries=3, retry_backoff=0.01
    )


@pytest.fixture
def fleet_admin(
    uow_factory: Callable[[], AbstractUnitOfWork], seat_lock: SeatLock
) -> FleetAdminUseCase:
    return FleetAdminUseCase(uow_factory=uow_factory, seat_lock=seat_lock)


@pytest.fixture
def user_account(uow_factory: Callable[[], AbstractUnitOfWork]) -> UserAccountUseCase:
    return UserAccountUseCase(uow_factory=uow_factory, password_hasher=BcryptPasswordHasher(rounds=4))


@pytest.fixture
def seat_query(uow_factory: Callable[[], AbstractUnitOfWork]) -> SeatQueryUseCase:
    return SeatQueryUseCase(uow_factory=uow_factory)


@pytest.fixture
def booking_query(uow_factory: Callable[[], AbstractUnitOfWork]) -> BookingQueryUseCase:
    return BookingQueryUseCase(uow_factory=uow_factory)


# =============================================================================
# Seed Data
# =============================================================================
@pytest.fixture
async def customers(user_account: UserAccountUseCase) -> dict[str, Any]:
    alice = await user_account.register(
        username=TEST_CUSTOMER_USERNAME,
        email='alice@example.com',
        password=DEFAULT_PASSWORD,
        full_name='Alice Chen',
    )
    bob = await user_account.register(
        username=ANOTHER_CUSTOMER_USERNAME,
        email='bob@example.com',
        password=DEFAULT_PASSWORD,
        full_name='Bob Lin',
    )
    return {'alice': alice, 'bob': bob}


@pytest.fixture
def make_trip(fleet_admin: FleetAdminUseCase) -> Callable[..., Any]:
    """Register a bus, a route and a one-off schedule on TRAVEL_DATE"""

    async def _make(
        *,
        bus_number: str = 'KA-01-0001',
        category: BusCategory = BusCategory.STANDARD,
        total_seats: int = 3,
        base_fare: Decimal = Decimal('10.00'),
        fare_multiplier: Decimal = Decimal('1.0'),
        service_date: date = TRAVEL_DATE,
    ) -> dict[str, Any]:
        bus = await fleet_admin.create_bus(
            bus_number=bus_number,
            name='Test Coach',
            category=category,
            total_seats=total_seats,
            base_fare=base_fare,
        )
        route = await fleet_admin.create_route(
            source='Bangalore',
            destination='Mysore',
            distance_km=Decimal('145'),
            duration_minutes=180,
            fare_multiplier=fare_multiplier,
        )
        schedule = await fleet_admin.create_schedule(
            bus_id=bus.id or 0,
            route_id=route.id or 0,
            departure_time=time(8, 0),
            arrival_time=time(11, 0),
            service_date=service_date,
        )
        return {'bus': bus, 'route': route, 'schedule': schedule}

    return _make


# =============================================================================
# HTTP Client
# =============================================================================
@pytest.fixture
def client(tmp_path: Path) -> Generator[TestClient, None, None]:
    from test.test_main import build_test_app

    database_url = f'sqlite+aiosqlite:///{tmp_path / "api_test.db"}'
    container.database.override(providers.Singleton(Database, database_url=database_url))
    try:
        with TestClient(build_test_app(), raise_server_exceptions=False) as test_client:
            yield test_client
    finally:
        container.database.reset_override()
