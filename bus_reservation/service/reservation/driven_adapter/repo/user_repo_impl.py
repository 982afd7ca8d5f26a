from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.app.interface.i_user_repo import IUserRepo
from bus_reservation.service.reservation.domain.entity.user_entity import UserEntity
from bus_reservation.service.reservation.domain.enum.user_role import UserRole
from bus_reservation.service.reservation.driven_adapter.model.user_model import UserModel


class UserRepoImpl(IUserRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, user: UserEntity) -> UserEntity:
        user_model = UserModel(
            username=user.username,
            email=user.email,
            hashed_password=user.hashed_password,
            full_name=user.full_name,
            phone_number=user.phone_number,
            role=user.role.value,
            created_at=datetime.now(timezone.utc),
        )
        self.session.add(user_model)
        await self.session.flush()
        return self._model_to_entity(user_model)

    @Logger.io
    async def get_by_id(self, *, user_id: int) -> Optional[UserEntity]:
        result = await self.session.execute(select(UserModel).where(UserModel.id == user_id))
        user_model = result.scalar_one_or_none()
        return self._model_to_entity(user_model) if user_model else None

    @Logger.io
    async def get_by_username(self, *, username: str) -> Optional[UserEntity]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.username == username)
        )
        user_model = result.scalar_one_or_none()
        return self._model_to_entity(user_model) if user_model else None

    @Logger.io
    async def exists(self, *, username: str, email: str) -> bool:
        result = await self.session.execute(
            select(UserModel.id)
            .where(or_(UserModel.username == username, UserModel.email == email))
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    @Logger.io
    async def touch_last_login(self, *, user_id: int) -> None:
        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(last_login_at=datetime.now(timezone.utc))
        )

    def _model_to_entity(self, user_model: UserModel) -> UserEntity:
        return UserEntity(
            id=user_model.id,
            username=user_model.username,
            email=user_model.email,
            full_name=user_model.full_name,
            phone_number=user_model.phone_number,
            hashed_password=user_model.hashed_password,
            role=UserRole(user_model.role),
            created_at=user_model.created_at,
            last_login_at=user_model.last_login_at,
        )
