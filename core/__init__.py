"""Core shared contracts and utilities."""

from core.naming import (
    PLACEHOLDER_RE,
    camel_to_kebab,
    find_placeholders,
    normalize_property_key,
    relaxed_property_keys,
    resolve_placeholder_default,
    to_env_name,
)
from core.structured_logging import (
    configure_structured_logging,
    get_phase,
    get_run_id,
    phase_scope,
    repository_scope,
    set_run_id,
)
from core.settings import (
    resolve_extra_excluded_dirs,
    resolve_log_level,
    resolve_max_class_lines,
    resolve_report_dir,
)
from core.run_artifacts import write_run_report

__all__ = [
    "PLACEHOLDER_RE",
    "camel_to_kebab",
    "find_placeholders",
    "normalize_property_key",
    "relaxed_property_keys",
    "resolve_placeholder_default",
    "to_env_name",
    "configure_structured_logging",
    "get_phase",
    "get_run_id",
    "phase_scope",
    "repository_scope",
    "set_run_id",
    "resolve_extra_excluded_dirs",
    "resolve_log_level",
    "resolve_max_class_lines",
    "resolve_report_dir",
    "write_run_report",
]
