"""
Environment variable catalog engine.

Runs the defaults, definition and usage phases over a repository and exposes
the result to downstream documentation writers.
"""

from catalog.engine import AnalysisResult, analyze_repository, write_catalog_report
from catalog.source_lookup import find_classes_by_pattern, get_class_code, list_classes_in_package

__all__ = [
    "AnalysisResult",
    "analyze_repository",
    "write_catalog_report",
    "get_class_code",
    "list_classes_in_package",
    "find_classes_by_pattern",
]
