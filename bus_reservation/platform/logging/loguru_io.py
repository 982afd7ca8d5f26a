"""
@Logger.io - call tracing for use cases, adapters and controllers

Every decorated call logs its (masked) arguments and return value at DEBUG, indented by
call depth so one request reads as a tree:

    args: ...                      coordinator.reserve
    ──args: ...                    booking_ledger.record
    ──return: Booking(...)
    return: Booking(...)

Errors are logged exactly once, at the frame where they were first seen. Domain errors
(CustomBaseError) are expected outcomes and log without traceback.
"""

from collections.abc import Awaitable, Iterator
from contextlib import contextmanager
from functools import wraps
from inspect import iscoroutinefunction
import types
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from bus_reservation.platform.config.core_setting import settings
from bus_reservation.platform.exception.exceptions import CustomBaseError
from bus_reservation.platform.logging.loguru_io_config import ExtraField, custom_logger
from bus_reservation.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    enter_call,
    exit_call,
    indent,
    mask_sensitive,
    normalize_args_kwargs,
    should_mask_keyword,
    truncate_content,
)


_F = TypeVar('_F', bound=Callable[..., Any])

_LOGGED_MARK = '_io_logged'


class LoguruIO:
    def __init__(
        self, custom_logger: 'LoguruLogger', *, reraise: bool = True, truncate_content: bool = False
    ) -> None:
        self._logger = custom_logger
        self.reraise = reraise
        self.truncate_content = truncate_content
        self.extra: dict[str, Any] = {}
        # wrapper -> _traced -> caller
        self.depth = 3

    def _bound(self, *, extra_depth: int = 0) -> 'LoguruLogger':
        return self._logger.bind(**self.extra).opt(depth=self.depth + extra_depth)

    def render(self, data: Any) -> Any:
        if isinstance(data, dict):
            rendered: Any = {
                key: self.render(should_mask_keyword(key, value)) for key, value in data.items()
            }
        elif isinstance(data, list | tuple):
            rendered = type(data)(self.render(item) for item in data)
        else:
            rendered = mask_sensitive(data)
        return truncate_content(rendered) if self.truncate_content else rendered

    def _log_exception(self, e: Exception) -> None:
        if getattr(e, _LOGGED_MARK, False):
            return
        setattr(e, _LOGGED_MARK, True)
        if isinstance(e, CustomBaseError):
            self._bound(extra_depth=1).error(f'{type(e).__name__}: {e.message}')
        else:
            self._bound(extra_depth=1).exception(f'{type(e).__name__}: {e}')

    @contextmanager
    def _traced(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Iterator[list[Any]]:
        """Yields a one-slot list the wrapper fills with the return value."""
        self.extra[ExtraField.CHAIN_START_TIME] = enter_call()
        result: list[Any] = []
        try:
            # Masking walks the whole payload, so only pay for it when DEBUG lines are emitted
            if settings.DEBUG:
                self._bound().debug(
                    f'{indent()}args: {self.render(args)}, kwargs: {self.render(kwargs)}'
                )
            yield result
            if settings.DEBUG and result:
                self._bound().debug(f'{indent()}return: {self.render(result[0])}')
        except Exception as e:
            self._log_exception(e)
            raise
        finally:
            exit_call()

    def _hide_from_traceback(self, func: Callable[..., Any]) -> Callable[..., Any]:
        func.__code__ = func.__code__.replace(  # type: ignore[attr-defined]
            co_filename=cast(types.FunctionType, self._logger.catch).__code__.co_filename
        )
        return func

    def __call__(self, func: _F) -> _F:
        self.extra[ExtraField.CALL_TARGET] = build_call_target_func_path(func)

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    with self._traced(args, kwargs) as result:
                        args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                        result.append(await cast(Awaitable[Any], func(*args, **kwargs)))
                except Exception:
                    if self.reraise:
                        raise
                    return None
                return result[0]

            return cast(_F, self._hide_from_traceback(async_wrapper))

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                with self._traced(args, kwargs) as result:
                    args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                    result.append(func(*args, **kwargs))
            except Exception:
                if self.reraise:
                    raise
                return None
            return result[0]

        return cast(_F, self._hide_from_traceback(sync_wrapper))


_P = ParamSpec('_P')
_T = TypeVar('_T')


class Logger:
    """
    Usage:
        Logger.base.info('🎫 [RESERVE] ...')        # plain event line

        @Logger.io                                  # trace a call
        async def reserve(...): ...

        @Logger.io(truncate_content=True)           # listings with long payloads
        async def list_buses(...): ...
    """

    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate_content: bool = False
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(
            custom_logger=custom_logger, reraise=reraise, truncate_content=truncate_content
        )
        return decorator(func) if func else decorator
