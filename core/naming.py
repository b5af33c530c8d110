"""Naming contract shared by the extraction and usage layers.

Every place that turns a property key or a field name into a catalog name
goes through these helpers so the Extractor, the Defaults Resolver and the
Tracer agree on spelling.
"""

from __future__ import annotations

import re

_CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")
_ENV_SEPARATOR_RE = re.compile(r"[.\-]")

# ${NAME} or ${NAME:default}; the default is everything after the first ':'
PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z0-9_.\-]+)(?::([^}]*))?\}")


def camel_to_kebab(name: str) -> str:
    """Convert ``poolSize`` into ``pool-size``.

    Only a lower-case letter followed by an upper-case letter is treated as a
    word boundary, so acronyms stay glued (``baseURL`` -> ``base-url``).
    """
    return _CAMEL_BOUNDARY_RE.sub(r"\1-\2", name).lower()


def to_env_name(property_name: str) -> str:
    """Upper-snake a dotted/dashed property name: ``app.db-url`` -> ``APP_DB_URL``."""
    return _ENV_SEPARATOR_RE.sub("_", property_name.upper())


def normalize_property_key(key: str | None) -> str:
    """Canonical form used to key the merged defaults map."""
    if key is None:
        return ""
    return key.strip().lower()


def relaxed_property_keys(property_name: str) -> list[str]:
    """Return relaxed spellings of ``property_name`` in lookup order.

    Tolerates naming drift between a class's declared prefix and the key
    actually written in a configuration file.
    """
    candidates = [
        property_name,
        property_name.replace("-", "_"),
        property_name.replace("_", "-"),
        property_name.replace(".", "_"),
        property_name.replace(".", "-"),
        property_name.replace(".", "_").replace("-", "_"),
        property_name.replace("-", ""),
    ]
    seen: set[str] = set()
    ordered: list[str] = []
    for candidate in candidates:
        if candidate not in seen:
            seen.add(candidate)
            ordered.append(candidate)
    return ordered


def find_placeholders(text: str) -> list[tuple[str, str | None, str]]:
    """Find every placeholder in ``text``.

    Returns:
        List of ``(name, default, matched_text)`` in order of appearance.
        ``default`` is ``None`` when the placeholder has no ``:`` segment and
        may be the empty string for ``${NAME:}``.
    """
    return [
        (match.group(1), match.group(2), match.group(0))
        for match in PLACEHOLDER_RE.finditer(text)
    ]


def resolve_placeholder_default(value: str) -> str | None:
    """Resolve a config value holding a placeholder to its inline default.

    Only the first placeholder counts: when it has a default, that default
    becomes the whole value (``jdbc:${H:localhost}/db`` -> ``localhost``);
    when it has none, ``None`` is returned. Values without placeholders come
    back as-is.
    """
    match = PLACEHOLDER_RE.search(value)
    if match is None:
        return value
    return match.group(2)
