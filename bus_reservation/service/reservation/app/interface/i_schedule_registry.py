from abc import ABC, abstractmethod
from typing import Optional

from bus_reservation.service.reservation.domain.entity.schedule_entity import Schedule


class IScheduleRegistry(ABC):
    @abstractmethod
    async def create(self, *, schedule: Schedule) -> Schedule:
        pass

    @abstractmethod
    async def get(self, *, schedule_id: int) -> Optional[Schedule]:
        pass

    @abstractmethod
    async def list_all(self, *, active_only: bool = False) -> list[Schedule]:
        """active_only keeps schedules whose bus is Active"""
        pass

    @abstractmethod
    async def list_by_bus(self, *, bus_id: int) -> list[Schedule]:
        pass

    @abstractmethod
    async def exists_for_route(self, *, route_id: int) -> bool:
        pass

    @abstractmethod
    async def update(self, *, schedule: Schedule) -> Schedule:
        pass

    @abstractmethod
    async def delete(self, *, schedule_id: int) -> None:
        pass

    @abstractmethod
    async def delete_by_bus(self, *, bus_id: int) -> None:
        pass
