import asyncio
from datetime import date

import pytest

from bus_reservation.platform.state.seat_lock import SeatLock, SeatLockTimeoutError


TRAVEL_DATE = date(2024, 6, 1)


def _key(seat_number: int = 1) -> str:
    return SeatLock.key_for(bus_id=1, seat_number=seat_number, travel_date=TRAVEL_DATE)


@pytest.mark.unit
class TestSeatLock:
    def test_key_is_scoped_by_bus_seat_and_date(self):
        assert _key(1) != _key(2)
        assert _key(1) != SeatLock.key_for(bus_id=1, seat_number=1, travel_date=date(2024, 6, 2))
        assert _key(1) == 'lock:bus:1:date:2024-06-01:seat:1'

    @pytest.mark.asyncio
    async def test_same_key_is_mutually_exclusive(self):
        seat_lock = SeatLock(timeout=1.0)
        inside = 0
        max_inside = 0

        async def critical_section() -> None:
            nonlocal inside, max_inside
            async with seat_lock.hold(key=_key()):
                inside += 1
                max_inside = max(max_inside, inside)
                await asyncio.sleep(0.01)
                inside -= 1

        await asyncio.gather(*(critical_section() for _ in range(5)))

        assert max_inside == 1

    @pytest.mark.asyncio
    async def test_different_keys_do_not_contend(self):
        seat_lock = SeatLock(timeout=0.05)

        async with seat_lock.hold(key=_key(1)):
            async with seat_lock.hold(key=_key(2)):
                assert seat_lock.active_keys == 2

    @pytest.mark.asyncio
    async def test_wait_is_bounded(self):
        seat_lock = SeatLock(timeout=0.05)

        async with seat_lock.hold(key=_key()):
            with pytest.raises(SeatLockTimeoutError) as exc_info:
                async with seat_lock.hold(key=_key()):
                    pass

        assert exc_info.value.key == _key()
        assert exc_info.value.timeout == 0.05

    @pytest.mark.asyncio
    async def test_idle_entries_are_discarded(self):
        seat_lock = SeatLock(timeout=0.05)

        async with seat_lock.hold(key=_key()):
            assert seat_lock.active_keys == 1

        assert seat_lock.active_keys == 0

    @pytest.mark.asyncio
    async def test_lock_is_released_when_body_raises(self):
        seat_lock = SeatLock(timeout=0.05)

        with pytest.raises(RuntimeError):
            async with seat_lock.hold(key=_key()):
                raise RuntimeError('boom')

        async with seat_lock.hold(key=_key()):
            pass
        assert seat_lock.active_keys == 0
