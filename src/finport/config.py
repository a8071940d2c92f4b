"""Import settings loaded from the environment."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from finport.domain.errors import ValidationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ImportSettings:
    """Tunables for the import pipeline."""

    session_ttl_minutes: int = 30
    max_upload_bytes: int = 10 * 1024 * 1024
    preview_rows: int = 10
    day_first: bool = True
    decimal_comma: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ImportSettings":
        """Build settings from FINPORT_* environment variables.

        Args:
            environ: Mapping to read from, defaults to ``os.environ``

        Raises:
            ValidationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            session_ttl_minutes=_int_setting(
                env, "FINPORT_SESSION_TTL_MINUTES", defaults.session_ttl_minutes
            ),
            max_upload_bytes=_int_setting(
                env, "FINPORT_MAX_UPLOAD_BYTES", defaults.max_upload_bytes
            ),
            preview_rows=_int_setting(env, "FINPORT_PREVIEW_ROWS", defaults.preview_rows),
            day_first=_bool_setting(env, "FINPORT_DAY_FIRST", defaults.day_first),
            decimal_comma=_bool_setting(env, "FINPORT_DECIMAL_COMMA", defaults.decimal_comma),
        )


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer, got '{raw}'")
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def _bool_setting(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValidationError(f"{name} must be a boolean, got '{raw}'")
