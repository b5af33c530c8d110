"""
Repository file discovery and module attribution.

Both extraction passes and the defaults resolver enumerate files through this
module so they agree on which files exist and in which order.
"""

import logging
import os
from typing import FrozenSet, List, Optional, Set

from core.settings import resolve_extra_excluded_dirs
from extraction.config import (
    BUILD_OUTPUT_DIR_NAMES,
    CONFIG_EXTENSIONS,
    EXCLUDED_DIR_NAMES,
    FALLBACK_MODULE_NAME,
    JAVA_EXTENSIONS,
    MODULE_MARKER_FILES,
)

logger = logging.getLogger(__name__)


def excluded_dir_names() -> FrozenSet[str]:
    """Built-in exclusions plus any from ``ENVCATALOG_EXCLUDED_DIRS``."""
    return EXCLUDED_DIR_NAMES | resolve_extra_excluded_dirs()


def _has_module_marker(file_names: List[str]) -> bool:
    return any(marker in file_names for marker in MODULE_MARKER_FILES)


def _discover_files(directory: str, extensions: Set[str], kind: str) -> List[str]:
    found = []
    directory = os.path.abspath(directory)
    excluded = excluded_dir_names()

    for root, dirs, files in os.walk(directory):
        # Skip hidden directories, test sources and build output
        pruned = excluded | BUILD_OUTPUT_DIR_NAMES if _has_module_marker(files) else excluded
        dirs[:] = [d for d in dirs if not d.startswith('.') and d not in pruned]

        for file in files:
            ext = os.path.splitext(file)[1].lower()
            if ext in extensions:
                found.append(os.path.join(root, file))

    logger.info(f"Found {len(found)} {kind} files in {directory}")
    return sorted(found)


def discover_config_files(directory: str) -> List[str]:
    """Recursively discover YAML and properties files.

    Args:
        directory: Repository root.

    Returns:
        Sorted list of absolute paths.
    """
    return _discover_files(directory, CONFIG_EXTENSIONS, "config")


def discover_java_files(directory: str) -> List[str]:
    """Recursively discover Java source files.

    Args:
        directory: Repository root.

    Returns:
        Sorted list of absolute paths.
    """
    return _discover_files(directory, JAVA_EXTENSIONS, "Java")


def relative_path(file_path: str, repo_root: str) -> str:
    """Repo-relative path with ``/`` separators."""
    try:
        relative = os.path.relpath(file_path, repo_root)
    except ValueError:
        logger.warning(
            "Cannot compute relative path for %s from %s. Using absolute path.",
            file_path,
            repo_root,
        )
        relative = file_path
    return relative.replace(os.sep, "/")


def _root_module_name(repo_root: str) -> str:
    return os.path.basename(os.path.normpath(repo_root)) or FALLBACK_MODULE_NAME


def _is_module_root(directory: str) -> bool:
    return any(os.path.isfile(os.path.join(directory, marker)) for marker in MODULE_MARKER_FILES)


def resolve_module_name(repo_root: str, file_path: str) -> str:
    """Name of the nearest build module enclosing ``file_path``.

    Walks upward from the file's directory to the repository root looking for
    a build descriptor. Returns the module's repo-relative path, or the root
    directory's own name when the nearest marker is at the root or there is
    none at all.
    """
    repo_root = os.path.abspath(repo_root)
    current: Optional[str] = os.path.dirname(os.path.abspath(file_path))

    while current is not None and (current == repo_root or current.startswith(repo_root + os.sep)):
        if _is_module_root(current):
            if current == repo_root:
                return _root_module_name(repo_root)
            return relative_path(current, repo_root)
        parent = os.path.dirname(current)
        current = parent if parent != current else None

    return _root_module_name(repo_root)
