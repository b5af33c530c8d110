"""
Config Defaults Resolver.

Flattens every YAML and properties file in the repository into one map of
property key -> literal value, resolving conflicts by file priority. The
Definition Extractor consults the result when a prefix-bound field has no
inline default.
"""

import logging
import os
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

from core.naming import normalize_property_key, relaxed_property_keys, resolve_placeholder_default
from extraction.config import (
    BASE_CONFIG_NAME,
    OTHER_PROPERTIES_PRIORITY,
    OTHER_YAML_PRIORITY,
    PROFILE_PREFIX,
    PROFILE_PRIORITY_BOOST,
    PROPERTIES_EXTENSIONS,
    ROOT_PROPERTIES_PRIORITY,
    ROOT_YAML_PRIORITY,
    UNKNOWN_CONFIG_PRIORITY,
    YAML_EXTENSIONS,
)
from extraction.diagnostics import AnalysisDiagnostics
from extraction.discovery import discover_config_files, relative_path

logger = logging.getLogger(__name__)

PHASE = "resolve-defaults"


class PropertyDefaults:
    """Merged, read-only view of literal property values across config files.

    Keys are stored trimmed and lower-cased; ``lookup`` tolerates separator
    drift between the spelling in code and the spelling in config.
    """

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(normalize_property_key(key))

    def lookup(self, property_name: str) -> Optional[str]:
        """Value for ``property_name`` under its first matching relaxed spelling."""
        for candidate in relaxed_property_keys(normalize_property_key(property_name)):
            if candidate in self._values:
                return self._values[candidate]
        return None

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"PropertyDefaults(size={len(self)})"


def file_priority(filename: str) -> int:
    """Priority of a config file by name; higher wins.

    ``application-<profile>.*`` files outrank the base ``application.*``
    file of either format.
    """
    name = os.path.basename(filename).lower()
    stem, ext = os.path.splitext(name)

    if ext in PROPERTIES_EXTENSIONS:
        priority = ROOT_PROPERTIES_PRIORITY if stem == BASE_CONFIG_NAME else OTHER_PROPERTIES_PRIORITY
    elif ext in YAML_EXTENSIONS:
        priority = ROOT_YAML_PRIORITY if stem == BASE_CONFIG_NAME else OTHER_YAML_PRIORITY
    else:
        priority = UNKNOWN_CONFIG_PRIORITY

    if name.startswith(PROFILE_PREFIX):
        priority += PROFILE_PRIORITY_BOOST
    return priority


# ---------------------------------------------------------------------------
# Properties files
# ---------------------------------------------------------------------------

_PROPERTIES_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _logical_lines(text: str) -> Iterator[str]:
    """Join backslash-continued lines and drop blank and comment lines."""
    pending: Optional[str] = None
    for raw in text.splitlines():
        line = raw.lstrip(" \t\f")
        if pending is None:
            if not line or line[0] in "#!":
                continue
            current = line
        else:
            current = pending + line

        trailing = len(current) - len(current.rstrip("\\"))
        if trailing % 2 == 1:
            pending = current[:-1]
            continue
        pending = None
        yield current

    if pending is not None:
        yield pending


def _unescape(text: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\" or i + 1 >= len(text):
            out.append(ch)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt == "u" and i + 6 <= len(text):
            try:
                out.append(chr(int(text[i + 2:i + 6], 16)))
                i += 6
                continue
            except ValueError:
                pass
        out.append(_PROPERTIES_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _split_property_line(line: str) -> Tuple[str, str]:
    """Split a logical line at the first unescaped ``=``, ``:`` or whitespace."""
    key_end = len(line)
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=: \t\f":
            key_end = i
            break
        i += 1

    key = line[:key_end]
    rest = line[key_end:].lstrip(" \t\f")
    if rest[:1] in ("=", ":") and (key_end == len(line) or line[key_end] in " \t\f"):
        rest = rest[1:].lstrip(" \t\f")
    elif key_end < len(line) and line[key_end] in "=:":
        rest = line[key_end + 1:].lstrip(" \t\f")
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> Dict[str, str]:
    """Parse ``.properties`` text with ``java.util.Properties`` semantics.

    Later duplicates of a key replace earlier ones.
    """
    values: Dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_property_line(line)
        values[key] = value
    return values


# ---------------------------------------------------------------------------
# YAML files
# ---------------------------------------------------------------------------

def _stringify(value: Any) -> str:
    """Render a YAML scalar or list the way the JVM would print it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return "[" + ", ".join(_stringify(item) for item in value if item is not None) + "]"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{_stringify(k)}={_stringify(v)}" for k, v in value.items()) + "}"
    return str(value)


def flatten_yaml(document: Any, prefix: str = "") -> Dict[str, str]:
    """Dot-join nested mappings; nulls are dropped."""
    flat: Dict[str, str] = {}
    if not isinstance(document, dict):
        return flat

    for key, value in document.items():
        full_key = f"{prefix}.{_stringify(key)}" if prefix else _stringify(key)
        if isinstance(value, dict):
            flat.update(flatten_yaml(value, full_key))
        elif value is not None:
            flat[full_key] = _stringify(value)
    return flat


def parse_yaml(text: str) -> Dict[str, str]:
    """Flatten every document of a (possibly multi-document) YAML file in order."""
    flat: Dict[str, str] = {}
    for document in yaml.safe_load_all(text):
        flat.update(flatten_yaml(document))
    return flat


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def read_config_values(file_path: str) -> Dict[str, str]:
    """Raw flattened key/value pairs of one config file.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not UTF-8.
        yaml.YAMLError: If a YAML file is malformed.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        text = f.read()

    ext = os.path.splitext(file_path)[1].lower()
    if ext in YAML_EXTENSIONS:
        return parse_yaml(text)
    return parse_properties(text)


def resolve_property_defaults(
    repo_root: str,
    diagnostics: Optional[AnalysisDiagnostics] = None,
) -> PropertyDefaults:
    """Build the merged defaults map for ``repo_root``.

    A value holding placeholders resolves to its first placeholder's inline
    default, or is dropped when that placeholder has none. Files of equal
    priority resolve last-seen-wins in traversal order.

    Args:
        repo_root: Repository root directory.
        diagnostics: Receives unreadable or malformed files.

    Returns:
        PropertyDefaults for the whole repository.
    """
    merged: Dict[str, str] = {}
    winning_priority: Dict[str, int] = {}

    for file_path in discover_config_files(repo_root):
        try:
            values = read_config_values(file_path)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            if diagnostics is not None:
                diagnostics.record_failure(relative_path(file_path, repo_root), PHASE, str(exc))
            else:
                logger.warning("Skipping config file %s: %s", file_path, exc)
            continue

        priority = file_priority(file_path)
        kept = 0
        for key, raw_value in values.items():
            value = resolve_placeholder_default(raw_value)
            if value is None:
                continue
            normalized = normalize_property_key(key)
            if not normalized:
                continue
            if priority >= winning_priority.get(normalized, -1):
                merged[normalized] = value
                winning_priority[normalized] = priority
                kept += 1

        logger.debug("Merged %d values from %s (priority %d)", kept, file_path, priority)

    logger.info("Resolved %d property defaults", len(merged))
    return PropertyDefaults(merged)
