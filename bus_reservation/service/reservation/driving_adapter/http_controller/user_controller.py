from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status

from bus_reservation.platform.config.di import Container
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.app.command.user_account_use_case import (
    UserAccountUseCase,
)
from bus_reservation.service.reservation.domain.entity.user_entity import UserEntity
from bus_reservation.service.reservation.driving_adapter.http_controller.auth.jwt_auth import (
    AUTH_COOKIE_NAME,
    JwtAuth,
)
from bus_reservation.service.reservation.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
)
from bus_reservation.service.reservation.driving_adapter.http_controller.schema.user_schema import (
    CreateUserRequest,
    LoginRequest,
    UserResponse,
)


router = APIRouter()


def _to_response(user_entity: UserEntity) -> UserResponse:
    return UserResponse(
        id=user_entity.id or 0,
        username=user_entity.username,
        email=user_entity.email,
        full_name=user_entity.full_name,
        role=user_entity.role,
        last_login_at=user_entity.last_login_at,
    )


@router.post('', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_user(
    request: CreateUserRequest,
    use_case: UserAccountUseCase = Depends(UserAccountUseCase.depends),
) -> UserResponse:
    # Self-registration always creates customers; admins are provisioned out of band
    user_entity = await use_case.register(
        username=request.username,
        email=request.email,
        password=request.password.get_secret_value(),
        full_name=request.full_name,
        phone_number=request.phone_number,
    )
    return _to_response(user_entity)


@router.post('/login', response_model=UserResponse)
@Logger.io
@inject
async def login(
    response: Response,
    request: LoginRequest,
    use_case: UserAccountUseCase = Depends(UserAccountUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> UserResponse:
    user_entity = await use_case.authenticate(
        username=request.username, password=request.password.get_secret_value()
    )

    token = jwt_auth.create_jwt_token(user_entity)

    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=jwt_auth.max_age_seconds,
        httponly=True,
        samesite='lax',
        secure=False,  # Set to True in production
    )

    return _to_response(user_entity)


@router.get('', response_model=UserResponse)
@Logger.io
async def get_me(
    current_user: UserEntity = Depends(get_current_user),
    use_case: UserAccountUseCase = Depends(UserAccountUseCase.depends),
) -> UserResponse:
    return _to_response(await use_case.get(user_id=current_user.id or 0))
