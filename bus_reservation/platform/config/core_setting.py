from pathlib import Path
from typing import List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Bus Reservation System'
    VERSION: str = '0.1.0'
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = f'sqlite+aiosqlite:///{_PROJECT_ROOT / "bus_reservation.db"}'
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_POOL_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True
    SQLITE_BUSY_TIMEOUT_SECONDS: float = 30.0

    # Security
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    ALGORITHM: str = 'HS256'
    BCRYPT_ROUNDS: int = 12

    # Reservation
    SEAT_LOCK_TIMEOUT_SECONDS: float = 5.0
    RESERVATION_MAX_RETRIES: int = 3
    RESERVATION_RETRY_BACKOFF_SECONDS: float = 0.05

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    @field_validator('RESERVATION_MAX_RETRIES')
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 1:
            raise ValueError('RESERVATION_MAX_RETRIES must be at least 1')
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith('sqlite')


settings = Settings()  # type: ignore
