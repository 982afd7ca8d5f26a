from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends
from opentelemetry import trace

from bus_reservation.platform.config.di import Container
from bus_reservation.platform.exception.exceptions import ForbiddenError
from bus_reservation.service.reservation.domain.entity.user_entity import UserEntity
from bus_reservation.service.reservation.domain.enum.user_role import UserRole
from bus_reservation.service.reservation.driving_adapter.http_controller.auth.jwt_auth import (
    AUTH_COOKIE_NAME,
    JwtAuth,
)


class RoleAuthStrategy:
    @staticmethod
    def can_manage_fleet(user: UserEntity) -> bool:
        return user.role == UserRole.ADMIN

    @staticmethod
    def is_customer(user: UserEntity) -> bool:
        return user.role == UserRole.CUSTOMER


@inject
async def get_current_user(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
) -> UserEntity:
    """Current user from the JWT cookie (stateless, no DB query)"""
    return jwt_auth.get_current_user_info_from_jwt(token)


async def require_admin(current_user: UserEntity = Depends(get_current_user)) -> UserEntity:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_admin',
        attributes={
            'user.id': current_user.id or 0,
            'user.role': current_user.role.value,
        },
    ):
        if not RoleAuthStrategy.can_manage_fleet(current_user):
            raise ForbiddenError('Only administrators can perform this action')
        return current_user
