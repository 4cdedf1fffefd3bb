# src/taskboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time; the composition root calls
  Settings.require_store() before wiring the store client.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError

ENV_PREFIX = "TASKBOARD"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Remote store ----
    store_url: str | None
    store_key: str | None
    store_rest_path: str
    http_timeout_seconds: float

    # ---- View defaults ----
    search_debounce_ms: int
    page_size: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskboard").strip() or "taskboard"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskboard"))

        # Accept the hosted-Postgres names too, so an existing .env keeps working.
        store_url = _first_env(_k("STORE_URL"), "SUPABASE_URL", default=None)
        store_key = _first_env(_k("STORE_KEY"), "SUPABASE_KEY", default=None)
        store_rest_path = _env(_k("STORE_REST_PATH"), "/rest/v1").strip() or "/rest/v1"
        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 30.0)

        search_debounce_ms = max(0, _env_int(_k("SEARCH_DEBOUNCE_MS"), 300))
        page_size = max(1, _env_int(_k("PAGE_SIZE"), 10))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_url=store_url.strip() if store_url else None,
            store_key=store_key.strip() if store_key else None,
            store_rest_path=store_rest_path,
            http_timeout_seconds=http_timeout_seconds,
            search_debounce_ms=search_debounce_ms,
            page_size=page_size,
        )

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000.0

    def require_store(self) -> tuple[str, str]:
        """Return (url, key) or raise ConfigError if either is missing."""
        missing = [
            name
            for name, value in ((_k("STORE_URL"), self.store_url), (_k("STORE_KEY"), self.store_key))
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing store configuration: {', '.join(missing)}")
        assert self.store_url is not None and self.store_key is not None
        return self.store_url, self.store_key


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
