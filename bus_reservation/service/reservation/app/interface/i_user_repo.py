from abc import ABC, abstractmethod
from typing import Optional

from bus_reservation.service.reservation.domain.entity.user_entity import UserEntity


class IUserRepo(ABC):
    @abstractmethod
    async def create(self, *, user: UserEntity) -> UserEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, user_id: int) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def get_by_username(self, *, username: str) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def exists(self, *, username: str, email: str) -> bool:
        """True if either the username or the email is already registered"""
        pass

    @abstractmethod
    async def touch_last_login(self, *, user_id: int) -> None:
        pass
