"""
Layer 1: Extraction Engine

Tree-sitter-based Java parser, config defaults resolver and environment
variable definition extractor.
"""

from extraction.models import (
    Definition,
    DefinitionKind,
    Usage,
    UsagePurpose,
    Variable,
    VariableCatalog,
    CatalogFrozenError,
)
from extraction.diagnostics import AnalysisDiagnostics, FileError
from extraction.parser import create_parser, parse_file, parse_bytes, count_error_nodes
from extraction.syntax import JavaSource
from extraction.discovery import (
    discover_config_files,
    discover_java_files,
    resolve_module_name,
)
from extraction.defaults import PropertyDefaults, file_priority, resolve_property_defaults
from extraction.extractor import load_java_source, iter_java_sources
from extraction.definitions import extract_definitions

__all__ = [
    # Data models
    "Definition",
    "DefinitionKind",
    "Usage",
    "UsagePurpose",
    "Variable",
    "VariableCatalog",
    "CatalogFrozenError",
    "AnalysisDiagnostics",
    "FileError",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    "JavaSource",
    # File discovery
    "discover_config_files",
    "discover_java_files",
    "resolve_module_name",
    # Defaults and definitions
    "PropertyDefaults",
    "file_priority",
    "resolve_property_defaults",
    "load_java_source",
    "iter_java_sources",
    "extract_definitions",
]
