import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import citeproc


_TRUTHY = {"1", "true", "yes", "on"}


# Path of the en-US locale shipped inside the citeproc-py distribution
def bundled_locale_path(tag: str = "en-US") -> str:
    return os.path.join(os.path.dirname(citeproc.__file__), "data", "locales", f"locales-{tag}.xml")


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    locale_file: Optional[str] = None
    max_body_bytes: int = 1024 * 1024
    default_locale: str = "en-US"
    suppress_engine_warnings: bool = False

    @property
    def english_locale_path(self) -> str:
        return self.locale_file or bundled_locale_path("en-US")


def load_settings() -> Settings:
    """Build settings from the process environment."""
    return Settings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3000),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        locale_file=os.getenv("CSL_LOCALE_FILE") or None,
        max_body_bytes=_env_int("MAX_BODY_BYTES", 1024 * 1024),
        default_locale=os.getenv("DEFAULT_LOCALE", "en-US"),
        suppress_engine_warnings=_env_bool("SUPPRESS_ENGINE_WARNINGS"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
