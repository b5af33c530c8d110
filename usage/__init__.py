"""
Usage tracing.

Finds the methods that consume each cataloged variable and tags each site
with an inferred purpose.
"""

from usage.patterns import PurposeRule, build_purpose_rules, classify_purpose
from usage.tracer import build_name_patterns, build_usage_context, dedup_usages, trace_usages

__all__ = [
    "PurposeRule",
    "build_purpose_rules",
    "classify_purpose",
    "build_name_patterns",
    "build_usage_context",
    "dedup_usages",
    "trace_usages",
]
