from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..validators.config_validators import to_lowercase, to_uppercase


class Platform(str, Enum):
    """
    Web-server integration whose request/response shape the interceptors and the
    exception filter work against.

    - STARLETTE: the framework's Request / Response wrapper objects.
    - ASGI: the raw ASGI scope underneath the wrapper.
    """

    STARLETTE = "starlette"
    ASGI = "asgi"


class CommonConfigOptions(BaseModel):
    """
    Read-only options handed to `register_common()` once at startup.
    """

    model_config = ConfigDict(frozen=True)

    platform: Platform = Platform.STARLETTE


class Settings(BaseSettings):
    """
    Application settings loaded from the environment (and an optional `.env`).
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Document store
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "crudcore"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5_000

    # HTTP platform
    PLATFORM: Platform = Platform.STARLETTE

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/crudcore")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_DRIVER_LOGGING: bool = False

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Uppercase LOG_LEVEL before validation so `debug` and `DEBUG` are both accepted.
        """
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", "PLATFORM", mode="before")
    def normalize_lowercase(cls, v):
        """
        Lowercase LOG_FORMAT and PLATFORM (enum members pass through untouched).
        """
        if isinstance(v, Enum):
            return v
        return to_lowercase(v)

    # --- Derived settings ---
    def common_options(self) -> CommonConfigOptions:
        return CommonConfigOptions(platform=self.PLATFORM)

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Settings never change at runtime, so one instance per process is enough.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
