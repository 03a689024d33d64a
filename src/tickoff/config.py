# src/tickoff/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is required at import time; every value has a default.
- Components get settings passed in, so tests can use a plain namespace.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .storage.kv_storage import is_safe_key

ENV_PREFIX = "TICKOFF"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
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

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_dir: Path

    # ---- Storage ----
    storage_key: str
    storage_quota_bytes: int  # 0 = unlimited
    persist_empty: bool  # False reproduces the legacy "never write []" behaviour

    # ---- Console ----
    color: bool
    default_sort: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tickoff") or "tickoff"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tickoff"))
        storage_dir = _env_path(_k("STORAGE_DIR"), data_dir / "storage")

        storage_key = _env(_k("STORAGE_KEY"), "todos").strip()
        if not is_safe_key(storage_key):
            storage_key = "todos"
        # Browsers give localStorage about 5 MB per origin.
        storage_quota_bytes = max(0, _env_int(_k("STORAGE_QUOTA_BYTES"), 5 * 1024 * 1024))
        persist_empty = _env_bool(_k("PERSIST_EMPTY"), True)

        color = _env_bool(_k("COLOR"), True) and os.getenv("NO_COLOR") is None
        default_sort = _env(_k("DEFAULT_SORT"), "createdAt")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_dir=storage_dir,
            storage_key=storage_key,
            storage_quota_bytes=storage_quota_bytes,
            persist_empty=persist_empty,
            color=color,
            default_sort=default_sort,
        )


SETTINGS = Settings.from_env()

# ---- Optional local overrides (never committed) ----
# Prefer .env; use config_local.py only for a few explicit overrides.
try:
    import config_local as _config_local  # type: ignore

    if hasattr(_config_local, "COLOR"):
        object.__setattr__(SETTINGS, "color", bool(_config_local.COLOR))  # type: ignore[misc]
    if hasattr(_config_local, "PERSIST_EMPTY"):
        object.__setattr__(SETTINGS, "persist_empty", bool(_config_local.PERSIST_EMPTY))  # type: ignore[misc]
except Exception:
    pass


def get_settings() -> Settings:
    return SETTINGS
