from __future__ import annotations
import logging
import os

DEFAULT_RECURSION_LIMIT = 10000
DEFAULT_LOG_LEVEL = "WARNING"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None


def flag_from_env(var: str, default: bool = False) -> bool:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


def get_recursion_limit() -> int:
    return int_from_env('MSCHEME_RECURSION_LIMIT', DEFAULT_RECURSION_LIMIT)


def get_collect_on_error() -> bool:
    return flag_from_env('MSCHEME_COLLECT_ON_ERROR')


def get_log_level() -> int:
    name = os.environ.get('MSCHEME_LOG_LEVEL', DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    # getLevelName returns a string for unknown names
    return level if isinstance(level, int) else logging.WARNING
