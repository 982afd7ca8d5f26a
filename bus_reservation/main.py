"""
Bus Reservation Service - Main Application
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from bus_reservation.platform.app_factory import create_app
from bus_reservation.platform.config.di import cleanup, container, setup
from bus_reservation.platform.config.wire_modules import WIRE_MODULES
from bus_reservation.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Bus Reservation] Starting up...')

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Bus Reservation] Dependency injection wired')

    await container.database().create_db_and_tables()
    Logger.base.info('🗄️ [Bus Reservation] Database tables ready')

    Logger.base.info('✅ [Bus Reservation] Startup complete')

    yield

    Logger.base.info('🛑 [Bus Reservation] Shutting down...')
    await cleanup()
    container.unwire()
    Logger.base.info('👋 [Bus Reservation] Shutdown complete')


app = create_app(lifespan=lifespan)
