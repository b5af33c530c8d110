"""
Class source lookup for the documentation generator.

Lets a downstream writer pull the source of classes that appear in the
catalog, bounded by ``ENVCATALOG_MAX_CLASS_LINES``.
"""

import logging
import os
from typing import List, Optional

from core.settings import resolve_max_class_lines
from extraction.config import JAVA_EXTENSIONS
from extraction.discovery import discover_java_files, relative_path

logger = logging.getLogger(__name__)

# Roots tried in order when resolving a fully-qualified class name
SOURCE_ROOTS = ("src/main/java", "src", "")

PATTERN_RESULT_LIMIT = 20

TRUNCATION_MARKER = "...truncated...\n"


def _limit_lines(content: str, max_lines: int) -> str:
    lines = content.splitlines()
    if max_lines <= 0 or len(lines) <= max_lines:
        return content
    return "\n".join(lines[:max_lines]) + "\n" + TRUNCATION_MARKER


def _read_source(path: str, max_lines: Optional[int]) -> Optional[str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Error reading class file %s: %s", path, e)
        return None
    limit = max_lines if max_lines is not None else resolve_max_class_lines()
    return _limit_lines(content, limit)


def get_class_code(repo_root: str, class_name: str, max_lines: Optional[int] = None) -> Optional[str]:
    """Source of a class by fully-qualified or simple name.

    The package path is tried under each of ``SOURCE_ROOTS``; failing that,
    the first ``<SimpleName>.java`` outside test and build directories is
    used.

    Returns:
        The (possibly truncated) source, or None if no file is found.
    """
    relative = class_name.replace(".", "/") + ".java"
    for source_root in SOURCE_ROOTS:
        candidate = os.path.join(repo_root, source_root, relative)
        if os.path.isfile(candidate):
            logger.debug("Found class file: %s", candidate)
            return _read_source(candidate, max_lines)

    file_name = class_name.rsplit(".", 1)[-1] + ".java"
    for path in discover_java_files(repo_root):
        if os.path.basename(path) == file_name:
            logger.debug("Found class file by name: %s", path)
            return _read_source(path, max_lines)

    logger.warning("Class not found: %s", class_name)
    return None


def list_classes_in_package(repo_root: str, package_name: str) -> List[str]:
    """Fully-qualified names of the classes directly inside a package."""
    package_path = package_name.replace(".", "/")
    for source_root in SOURCE_ROOTS[:2]:
        directory = os.path.join(repo_root, source_root, package_path)
        if not os.path.isdir(directory):
            continue
        classes = []
        for entry in sorted(os.listdir(directory)):
            stem, ext = os.path.splitext(entry)
            if ext in JAVA_EXTENSIONS and os.path.isfile(os.path.join(directory, entry)):
                classes.append(f"{package_name}.{stem}")
        return classes
    return []


def find_classes_by_pattern(repo_root: str, pattern: str, limit: int = PATTERN_RESULT_LIMIT) -> List[str]:
    """Repo-relative paths of Java files whose name contains ``pattern`` (case-insensitive)."""
    needle = pattern.lower()
    matches = [
        relative_path(path, repo_root)
        for path in discover_java_files(repo_root)
        if needle in os.path.basename(path).lower()
    ]
    return matches[:limit]
