from abc import ABC, abstractmethod
from typing import Optional

from bus_reservation.service.reservation.domain.entity.route_entity import Route


class IRouteRegistry(ABC):
    @abstractmethod
    async def create(self, *, route: Route) -> Route:
        pass

    @abstractmethod
    async def get(self, *, route_id: int) -> Optional[Route]:
        pass

    @abstractmethod
    async def list_all(self) -> list[Route]:
        pass

    @abstractmethod
    async def update(self, *, route: Route) -> Route:
        pass

    @abstractmethod
    async def delete(self, *, route_id: int) -> None:
        pass
