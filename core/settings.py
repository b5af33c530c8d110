"""Environment-driven runtime settings.

Values are read from the process environment after loading a ``.env`` file
(python-dotenv). Invalid values never abort a run: a warning is logged and
the default is used.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Idempotent; does nothing if no .env file is present
load_dotenv()

LOG_LEVEL_ENV = "ENVCATALOG_LOG_LEVEL"
EXCLUDED_DIRS_ENV = "ENVCATALOG_EXCLUDED_DIRS"
REPORT_DIR_ENV = "ENVCATALOG_REPORT_DIR"
MAX_CLASS_LINES_ENV = "ENVCATALOG_MAX_CLASS_LINES"

DEFAULT_REPORT_DIR = "output/catalog_reports"
DEFAULT_MAX_CLASS_LINES = 1000


def _env_str(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def resolve_log_level(default: int = logging.INFO) -> int:
    """Resolve the logging level from ``ENVCATALOG_LOG_LEVEL``."""
    raw = _env_str(LOG_LEVEL_ENV)
    if raw is None:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        logger.warning("Unknown %s=%r; using %s", LOG_LEVEL_ENV, raw, logging.getLevelName(default))
        return default
    return level


def resolve_extra_excluded_dirs() -> frozenset[str]:
    """Directory names to skip in addition to the built-in exclusions."""
    raw = _env_str(EXCLUDED_DIRS_ENV)
    if raw is None:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


def resolve_report_dir() -> str:
    return _env_str(REPORT_DIR_ENV) or DEFAULT_REPORT_DIR


def resolve_max_class_lines(default: int = DEFAULT_MAX_CLASS_LINES) -> int:
    """Maximum number of lines returned by the class source lookup."""
    raw = _env_str(MAX_CLASS_LINES_ENV)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r; using %d", MAX_CLASS_LINES_ENV, raw, default)
        return default
    if value <= 0:
        logger.warning("%s must be positive, got %d; using %d", MAX_CLASS_LINES_ENV, value, default)
        return default
    return value
