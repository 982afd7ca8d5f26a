"""
User Account Use Cases
"""

from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from pydantic import SecretStr

from bus_reservation.platform.config.di import Container
from bus_reservation.platform.database.unit_of_work import AbstractUnitOfWork
from bus_reservation.platform.exception.exceptions import (
    ConflictError,
    LoginError,
    UserNotFoundError,
)
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.app.interface.i_password_hasher import IPasswordHasher
from bus_reservation.service.reservation.domain.entity.user_entity import UserEntity
from bus_reservation.service.reservation.domain.enum.user_role import UserRole


class UserAccountUseCase:
    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        password_hasher: IPasswordHasher,
    ) -> None:
        self.uow_factory = uow_factory
        self.password_hasher = password_hasher

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        password_hasher: IPasswordHasher = Depends(Provide[Container.password_hasher]),
    ) -> Self:
        return cls(uow_factory=uow_factory, password_hasher=password_hasher)

    @Logger.io
    async def register(
        self,
        *,
        username: str,
        email: str,
        password: str,
        full_name: str,
        phone_number: str = '',
        role: UserRole = UserRole.CUSTOMER,
    ) -> UserEntity:
        user_entity = UserEntity(
            username=username.strip(),
            email=email.strip().lower(),
            full_name=full_name.strip(),
            phone_number=phone_number.strip(),
            role=role,
        )
        user_entity.validate_profile()
        user_entity.set_password(password, self.password_hasher)

        async with self.uow_factory() as uow:
            if await uow.user_repo.exists(username=user_entity.username, email=user_entity.email):
                raise ConflictError('Username or email already registered')
            created = await uow.user_repo.create(user=user_entity)
            await uow.commit()

        Logger.base.info(f'👤 [USER] Registered {created.username} as {created.role.value}')
        return created

    @Logger.io
    async def authenticate(self, *, username: str, password: str) -> UserEntity:
        async with self.uow_factory() as uow:
            user_entity = UserEntity.validate_user_exists(
                await uow.user_repo.get_by_username(username=username.strip())
            )
            verified = self.password_hasher.verify_password(
                plain_password=SecretStr(password), hashed_password=user_entity.hashed_password
            )
            if not verified:
                raise LoginError('LOGIN_BAD_CREDENTIALS')
            await uow.user_repo.touch_last_login(user_id=user_entity.id or 0)
            await uow.commit()
        return user_entity

    @Logger.io
    async def get(self, *, user_id: int) -> UserEntity:
        async with self.uow_factory() as uow:
            user_entity = await uow.user_repo.get_by_id(user_id=user_id)
        if not user_entity:
            raise UserNotFoundError()
        return user_entity
