from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")

DEFAULT_STORAGE_DIR = "./storage"
DEFAULT_MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5 MiB


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    STORAGE_DIR: str = DEFAULT_STORAGE_DIR
    MAX_UPLOAD_SIZE: int = DEFAULT_MAX_UPLOAD_SIZE
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    TLS_CERT_FILE: str | None = None
    TLS_KEY_FILE: str | None = None
    ENABLE_METRICS: bool = True
    API_KEY_ENABLED: bool = False
    API_KEY: str | None = None
    CORS_ENABLED: bool = False
    CORS_ORIGINS: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.MAX_UPLOAD_SIZE <= 0:
            raise ValueError("MAX_UPLOAD_SIZE must be a positive number of bytes.")
        if bool(self.TLS_CERT_FILE) != bool(self.TLS_KEY_FILE):
            raise ValueError(
                "TLS_CERT_FILE and TLS_KEY_FILE must be provided together."
            )

    @property
    def storage_root(self) -> Path:
        return Path(self.STORAGE_DIR)

    @property
    def tls_enabled(self) -> bool:
        return bool(self.TLS_CERT_FILE and self.TLS_KEY_FILE)

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            STORAGE_DIR=os.environ.get("STORAGE_DIR", cls.STORAGE_DIR),
            MAX_UPLOAD_SIZE=int(
                os.environ.get("MAX_UPLOAD_SIZE", cls.MAX_UPLOAD_SIZE)
            ),
            HOST=os.environ.get("HOST", cls.HOST),
            PORT=int(os.environ.get("PORT", cls.PORT)),
            TLS_CERT_FILE=os.environ.get("TLS_CERT_FILE") or None,
            TLS_KEY_FILE=os.environ.get("TLS_KEY_FILE") or None,
            ENABLE_METRICS=_as_bool(
                os.environ.get("ENABLE_METRICS"), cls.ENABLE_METRICS
            ),
            API_KEY_ENABLED=_as_bool(
                os.environ.get("API_KEY_ENABLED"), cls.API_KEY_ENABLED
            ),
            API_KEY=os.environ.get("API_KEY"),
            CORS_ENABLED=_as_bool(os.environ.get("CORS_ENABLED"), cls.CORS_ENABLED),
            CORS_ORIGINS=_as_list(os.environ.get("CORS_ORIGINS")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
