from __future__ import annotations

import logging
import os
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"
_LEVEL_ENV_VAR = "MAPSCOUT_LOG_LEVEL"
_DEBUG_FLAG = "MAPSCOUT_DEBUG"
# requests logs through urllib3; NiceGUI serves through uvicorn.
_QUIET_LOGGERS = ("urllib3", "uvicorn.access")


def _parse_level(text: str) -> int:
    text = text.strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else logging.INFO


def _resolve_env_level() -> Optional[int]:
    value = os.getenv(_LEVEL_ENV_VAR, "")
    if value.strip():
        return _parse_level(value)
    if os.getenv(_DEBUG_FLAG, "").strip().lower() in {"1", "true", "yes", "on"}:
        return logging.DEBUG
    return None


def configure_root(default_level: int = logging.INFO) -> int:
    """Install the compact root handler; MAPSCOUT_LOG_LEVEL or MAPSCOUT_DEBUG override the level."""
    effective = _resolve_env_level() or default_level

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=effective, format=_DEFAULT_FORMAT, datefmt=_DEFAULT_DATEFMT)
    root.setLevel(effective)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(effective, logging.WARNING))
    return effective


def apply_debug_preference(debug_enabled: bool) -> int:
    """Set the root level from the ``debug_logging`` setting unless the environment pins one."""
    level = _resolve_env_level()
    if level is None:
        level = logging.DEBUG if debug_enabled else logging.INFO
    logging.getLogger().setLevel(level)
    return level


def env_requests_debug() -> bool:
    """True when the environment forces DEBUG logging."""
    level = _resolve_env_level()
    return level is not None and level <= logging.DEBUG
