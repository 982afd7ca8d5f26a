"""
Test-specific FastAPI Application

Same routers and handlers as production; the lifespan also seeds an admin account,
since self-registration only creates customers.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bus_reservation.platform.app_factory import create_app
from bus_reservation.platform.config.di import container
from bus_reservation.platform.config.wire_modules import WIRE_MODULES
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.app.command.user_account_use_case import (
    UserAccountUseCase,
)
from bus_reservation.service.reservation.domain.enum.user_role import UserRole
from test.test_constants import DEFAULT_PASSWORD, TEST_ADMIN_EMAIL, TEST_ADMIN_USERNAME


@asynccontextmanager
async def lifespan_for_tests(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🧪 [Test App] Starting up...')

    container.wire(modules=WIRE_MODULES)
    database = container.database()
    await database.create_db_and_tables()

    await UserAccountUseCase(
        uow_factory=container.unit_of_work, password_hasher=container.password_hasher()
    ).register(
        username=TEST_ADMIN_USERNAME,
        email=TEST_ADMIN_EMAIL,
        password=DEFAULT_PASSWORD,
        full_name='Fleet Admin',
        role=UserRole.ADMIN,
    )

    yield

    await database.dispose()
    container.unwire()
    Logger.base.info('🧪 [Test App] Shut down')


def build_test_app() -> FastAPI:
    return create_app(lifespan=lifespan_for_tests, title_suffix=' (Test)')
