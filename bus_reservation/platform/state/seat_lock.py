"""
Per-key in-process lock for seat reservations

Every reserve/cancel for the same (bus, seat, travel date) key runs under the same
asyncio.Lock. Acquisition waits at most `timeout` seconds, so no request blocks forever.
Entries are reference counted and dropped once nobody holds or waits for them.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator

import attrs

from bus_reservation.platform.logging.loguru_io import Logger


class SeatLockTimeoutError(Exception):
    def __init__(self, key: str, timeout: float) -> None:
        self.key = key
        self.timeout = timeout
        super().__init__(f'Timed out after {timeout}s waiting for lock {key}')


@attrs.define
class _LockEntry:
    lock: asyncio.Lock = attrs.field(factory=asyncio.Lock)
    users: int = 0


class SeatLock:
    """
    Keyed lock registry

    Usage:
        async with seat_lock.hold(key=SeatLock.key_for(bus_id=1, seat_number=2, travel_date=d)):
            ...
    """

    def __init__(self, *, timeout: float) -> None:
        self.timeout = timeout
        self._entries: dict[str, _LockEntry] = {}

    @staticmethod
    def key_for(*, bus_id: int, seat_number: int, travel_date: date) -> str:
        return f'lock:bus:{bus_id}:date:{travel_date.isoformat()}:seat:{seat_number}'

    @property
    def active_keys(self) -> int:
        return len(self._entries)

    @asynccontextmanager
    async def hold(self, *, key: str, timeout: float | None = None) -> AsyncIterator[None]:
        wait = self.timeout if timeout is None else timeout
        entry = self._entries.setdefault(key, _LockEntry())
        entry.users += 1
        try:
            try:
                await asyncio.wait_for(entry.lock.acquire(), timeout=wait)
            except TimeoutError as e:
                Logger.base.warning(f'⏳ [LOCK] Timed out waiting for {key} ({wait}s)')
                raise SeatLockTimeoutError(key, wait) from e

            Logger.base.debug(f'🔒 [LOCK] Acquired {key}')
            try:
                yield
            finally:
                entry.lock.release()
                Logger.base.debug(f'🔓 [LOCK] Released {key}')
        finally:
            entry.users -= 1
            if entry.users == 0 and self._entries.get(key) is entry:
                del self._entries[key]
