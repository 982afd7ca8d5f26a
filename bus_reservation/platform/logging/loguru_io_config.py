"""
Loguru setup shared by every module

- One bound logger (`custom_logger`) carrying service context, call target and chain
  start time, so plain `Logger.base` lines and `@Logger.io` lines share one format
- stdout sink always; hourly rotating file sink under LOG_DIR when DEBUG is on
- stdlib logging (uvicorn, sqlalchemy, asyncio) is routed into the same sinks
"""

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from bus_reservation.platform.config.core_setting import settings
from bus_reservation.platform.constant.path import LOG_DIR
from bus_reservation.platform.logging.service_context import get_service_context


# Keys masked in @Logger.io args/returns
SENSITIVE_KEYWORDS = {
    'password',
    'plain_password',
    'hashed_password',
    'token',
    'passenger_phone',
    'phone_number',
}
DEPTH_LINE = '──'

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


def _bind_defaults() -> 'LoguruLogger':
    return loguru_logger.bind(
        **{
            ExtraField.SERVICE_CONTEXT: get_service_context(),
            ExtraField.CHAIN_START_TIME: '',
            ExtraField.CALL_TARGET: '',
        }
    )


LOG_FORMAT = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru, keeping the original caller location."""

    def __init__(self, target: 'LoguruLogger') -> None:
        super().__init__()
        self._target = target

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()
        if record.levelno <= logging.DEBUG and 'Using selector:' in message:
            return

        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        self._target.opt(depth=depth, exception=record.exc_info).log(level, message)


def _log_file_path() -> str:
    log_dir = os.environ.get('TEST_LOG_DIR', str(LOG_DIR))
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    return f'{log_dir}/{prefix}{datetime.now(timezone.utc).strftime("%Y-%m-%d_%H")}.log'


def _configure() -> 'LoguruLogger':
    level = 'DEBUG' if settings.DEBUG else 'INFO'

    loguru_logger.remove()
    bound = _bind_defaults()
    bound.add(sys.stdout, format=LOG_FORMAT, level=level, enqueue=True)
    if settings.DEBUG:
        bound.add(
            _log_file_path(),
            format=LOG_FORMAT,
            level=level,
            rotation='1 hour',
            retention='7 days',
            compression='gz',
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler(bound)], level=0, force=True)
    return bound


custom_logger = _configure()
