"""Runtime configuration helpers."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 2989
DEFAULT_LOG_LEVEL = "info"


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the compiled-in settings; the service reads no environment."""
    return Settings()
