import json
from pathlib import Path
from typing import Annotated, List, Literal, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Club Reservation Engine'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Security
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    ALGORITHM: str = 'HS256'

    # CORS
    # Comma separated or a JSON list; NoDecode hands the raw string to the validator
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str):
            v = v.strip()
            if v.startswith('['):
                return [str(i).strip() for i in json.loads(v)]
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'club_reservation'
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str = ''  # Full async URL override (e.g. sqlite+aiosqlite:///./local.db)

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # Connection pool (ignored by non-postgres URLs)
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 5  # Seconds to wait for a pooled connection
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    # Store
    STORE_BACKEND: Literal['postgres', 'memory'] = 'postgres'
    STORE_TIMEOUT_SECONDS: float = 5.0  # Upper bound for every store call

    # Reservation policy
    RESERVATION_ALLOW_DUPLICATE_ACTIVE: bool = True
    RESERVATION_MAX_CONFIRMED_PER_EVENT: Optional[int] = None  # None = unlimited
    CHECK_IN_WINDOW_ENFORCED: bool = False
    CHECK_IN_OPENS_MINUTES_BEFORE_START: int = 60
    RESERVATION_CANCEL_AFTER_START_ALLOWED: bool = True


settings = Settings()  # type: ignore
