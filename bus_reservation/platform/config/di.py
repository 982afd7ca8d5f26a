"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from bus_reservation.platform.config.core_setting import Settings
from bus_reservation.platform.database.orm_db_setting import Database
from bus_reservation.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from bus_reservation.platform.state.seat_lock import SeatLock
from bus_reservation.service.reservation.driven_adapter.security.bcrypt_password_hasher import (
    BcryptPasswordHasher,
)
from bus_reservation.service.reservation.driving_adapter.http_controller.auth.jwt_auth import (
    JwtAuth,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine manager lives inside; one per process)
    database = providers.Singleton(Database)

    # Unit of Work (new instance per unit; each opens its own session)
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.new_session
    )

    # Per-seat key lock shared by every reserve/cancel in this process
    seat_lock = providers.Singleton(
        SeatLock, timeout=config_service.provided.SEAT_LOCK_TIMEOUT_SECONDS
    )

    # Auth services
    password_hasher = providers.Singleton(
        BcryptPasswordHasher, rounds=config_service.provided.BCRYPT_ROUNDS
    )
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()


def setup() -> None:
    container.config_service()
    container.database()


async def cleanup() -> None:
    await container.database().dispose()
    container.reset_singletons()
