"""
FastAPI app assembly used by both the server entrypoint and the test client
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from bus_reservation.platform.config.core_setting import settings
from bus_reservation.platform.exception.exception_handlers import register_exception_handlers
from bus_reservation.service.reservation.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)
from bus_reservation.service.reservation.driving_adapter.http_controller.fleet_controller import (
    bus_router,
    route_router,
    schedule_router,
)
from bus_reservation.service.reservation.driving_adapter.http_controller.user_controller import (
    router as auth_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Bus seat reservation service',
) -> FastAPI:
    """Routers, CORS, domain-error handlers, health and /metrics on one app.

    The caller owns the lifespan, so tests can swap the database without touching routing.
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(auth_router, prefix='/api/user', tags=['user'])
    app.include_router(bus_router, prefix='/api/bus', tags=['bus'])
    app.include_router(route_router, prefix='/api/route', tags=['route'])
    app.include_router(schedule_router, prefix='/api/schedule', tags=['schedule'])
    app.include_router(booking_router, prefix='/api/booking', tags=['booking'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    @app.get('/health')
    async def health_check() -> dict[str, str]:
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
