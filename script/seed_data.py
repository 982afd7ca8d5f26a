#!/usr/bin/env python3
"""
Database Seed Script
Populate a small fleet and the initial accounts

Features:
1. Create Users - 1 admin + 1 customer (self-registration only creates customers)
2. Create Fleet - 3 buses (one per priced category), 2 routes, weekly schedules

Notes:
- Seats need no seeding: a seat without an occupancy row is available
- Run `python script/reset_database.py` first for a clean database
"""

import asyncio
from dataclasses import dataclass
from datetime import time
from decimal import Decimal

from bus_reservation.platform.config.core_setting import settings
from bus_reservation.platform.database.orm_db_setting import Database
from bus_reservation.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from bus_reservation.platform.state.seat_lock import SeatLock
from bus_reservation.service.reservation.app.command.fleet_admin_use_case import (
    FleetAdminUseCase,
)
from bus_reservation.service.reservation.app.command.user_account_use_case import (
    UserAccountUseCase,
)
from bus_reservation.service.reservation.domain.enum.bus_category import BusCategory
from bus_reservation.service.reservation.domain.enum.day_of_week import DayOfWeek
from bus_reservation.service.reservation.domain.enum.user_role import UserRole
from bus_reservation.service.reservation.driven_adapter.security.bcrypt_password_hasher import (
    BcryptPasswordHasher,
)


DEFAULT_PASSWORD = 'P@ssw0rd'


@dataclass
class UserConfig:
    """User seed configuration"""

    username: str
    full_name: str
    role: UserRole


@dataclass
class BusConfig:
    bus_number: str
    name: str
    category: BusCategory
    total_seats: int
    base_fare: Decimal


TEST_USERS = [
    UserConfig(username='admin', full_name='Fleet Admin', role=UserRole.ADMIN),
    UserConfig(username='customer', full_name='Init Customer', role=UserRole.CUSTOMER),
]

TEST_BUSES = [
    BusConfig('KA-01-1001', 'City Hopper', BusCategory.ECONOMY, 40, Decimal('8.00')),
    BusConfig('KA-01-2002', 'Express Line', BusCategory.STANDARD, 36, Decimal('12.00')),
    BusConfig('KA-01-3003', 'Night Rider', BusCategory.LUXURY, 24, Decimal('20.00')),
]


async def create_users(user_account: UserAccountUseCase) -> None:
    print(f'👥 Creating {len(TEST_USERS)} users...')
    for config in TEST_USERS:
        created = await user_account.register(
            username=config.username,
            email=f'{config.username}@example.com',
            password=DEFAULT_PASSWORD,
            full_name=config.full_name,
            role=config.role,
        )
        print(f'   ✅ Created {created.role.value}: ID={created.id}, Username={created.username}')
    print(f'   📧 Credentials: {DEFAULT_PASSWORD}')


async def create_fleet(fleet_admin: FleetAdminUseCase) -> None:
    print('🚌 Creating fleet...')
    short_route = await fleet_admin.create_route(
        source='Bangalore',
        destination='Mysore',
        distance_km=Decimal('145'),
        duration_minutes=180,
    )
    long_route = await fleet_admin.create_route(
        source='Bangalore',
        destination='Chennai',
        distance_km=Decimal('346'),
        duration_minutes=360,
        fare_multiplier=Decimal('1.5'),
    )
    print(f'   ✅ Created routes: {short_route.id}, {long_route.id}')

    for index, config in enumerate(TEST_BUSES):
        bus = await fleet_admin.create_bus(
            bus_number=config.bus_number,
            name=config.name,
            category=config.category,
            total_seats=config.total_seats,
            base_fare=config.base_fare,
        )
        route = short_route if index % 2 == 0 else long_route
        for day in DayOfWeek:
            await fleet_admin.create_schedule(
                bus_id=bus.id or 0,
                route_id=route.id or 0,
                departure_time=time(7 + index * 3),
                arrival_time=time(10 + index * 3),
                day_of_week=day,
            )
        print(
            f'   ✅ Created bus: ID={bus.id}, Number={bus.bus_number}, '
            f'{bus.category.value}, {bus.total_seats} seats, daily on route {route.id}'
        )


async def main():
    print('🌱 Starting data seeding...')
    print('=' * 50)
    print(f'Database URL: {settings.DATABASE_URL}')

    database = Database()
    seat_lock = SeatLock(timeout=settings.SEAT_LOCK_TIMEOUT_SECONDS)

    def uow_factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory=database.new_session)

    try:
        await database.create_db_and_tables()
        await create_users(
            UserAccountUseCase(
                uow_factory=uow_factory,
                password_hasher=BcryptPasswordHasher(rounds=settings.BCRYPT_ROUNDS),
            )
        )
        print()
        await create_fleet(FleetAdminUseCase(uow_factory=uow_factory, seat_lock=seat_lock))

        print()
        print('=' * 50)
        print('🌱 Data seeding completed!')
        print('📋 Accounts:')
        for user in TEST_USERS:
            print(f'   {user.role.value}: {user.username} / {DEFAULT_PASSWORD}')

    except Exception as e:
        print(f'❌ Seeding failed: {e}')
        exit(1)

    finally:
        await database.dispose()


if __name__ == '__main__':
    asyncio.run(main())
