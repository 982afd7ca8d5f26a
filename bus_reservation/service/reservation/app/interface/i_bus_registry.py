from abc import ABC, abstractmethod
from typing import Optional

from bus_reservation.service.reservation.domain.entity.bus_entity import Bus


class IBusRegistry(ABC):
    @abstractmethod
    async def create(self, *, bus: Bus) -> Bus:
        pass

    @abstractmethod
    async def get(self, *, bus_id: int) -> Optional[Bus]:
        pass

    @abstractmethod
    async def get_by_number(self, *, bus_number: str) -> Optional[Bus]:
        pass

    @abstractmethod
    async def list_all(self, *, active_only: bool = False) -> list[Bus]:
        pass

    @abstractmethod
    async def update(self, *, bus: Bus) -> Bus:
        pass

    @abstractmethod
    async def delete(self, *, bus_id: int) -> None:
        pass
