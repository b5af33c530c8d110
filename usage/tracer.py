"""
Usage Tracer.

Attaches to every cataloged variable the methods that consume it. Two
strategies run over every parsed source file:

* field-following: a ``@Value`` field binding a cataloged name is followed
  one hop into every method of the same file whose body mentions the field;
* direct matching: a method body containing ``${NAME}`` or the literal
  ``"NAME"`` for a cataloged name.

Usages are deduplicated per variable on (type, method), keeping the first.
"""

import logging
import os
import re
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Tuple

from tree_sitter import Node

from core.naming import find_placeholders
from extraction.config import VALUE_ANNOTATION
from extraction.extractor import iter_java_sources
from extraction.models import Usage, VariableCatalog
from extraction.syntax import JavaSource
from usage.config import CONTEXT_ANNOTATION_PREFIXES, CONTEXT_TYPE_ROLES, DEFAULT_TYPE_ROLE, PHASE
from usage.patterns import PurposeRule, classify_purpose

logger = logging.getLogger(__name__)

UsagesByName = Dict[str, List[Usage]]


def build_usage_context(type_name: str, annotation_names: Sequence[str]) -> str:
    """Human-readable description of where a usage sits.

    Example:
        >>> build_usage_context("com.x.DataSourceConfig", ["Bean"])
        'Bean configuration: Configuration in DataSourceConfig'
    """
    simple_name = type_name.rsplit(".", 1)[-1]

    prefix = ""
    for annotation, text in CONTEXT_ANNOTATION_PREFIXES:
        if annotation in annotation_names:
            prefix = text
            break

    role = DEFAULT_TYPE_ROLE
    for fragment, text in CONTEXT_TYPE_ROLES:
        if fragment in simple_name:
            role = text
            break

    return f"{prefix}{role} {simple_name}"


def build_name_patterns(names: Iterable[str]) -> Tuple[Optional[Pattern[str]], Optional[Pattern[str]]]:
    """Compile the direct-match patterns for a set of cataloged names.

    Returns:
        ``(placeholder_pattern, quoted_literal_pattern)``, both None when there
        are no names.
    """
    escaped = [re.escape(name) for name in names]
    if not escaped:
        return None, None
    alternation = "|".join(escaped)
    placeholder = re.compile(r"\$\{(" + alternation + r")(?::[^}]*)?\}")
    quoted = re.compile(r'"(' + alternation + r')"')
    return placeholder, quoted


def dedup_usages(usages: Iterable[Usage]) -> List[Usage]:
    """Keep the first usage per (type, method), in order."""
    unique: Dict[tuple, Usage] = {}
    for usage in usages:
        unique.setdefault(usage.key, usage)
    return list(unique.values())


def _ordered_unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


class _FileTracer:
    """Runs both strategies over one source file."""

    def __init__(
        self,
        source: JavaSource,
        catalog: VariableCatalog,
        rules: Tuple[PurposeRule, ...],
        placeholder_pattern: Pattern[str],
        quoted_pattern: Pattern[str],
    ):
        self.source = source
        self.catalog = catalog
        self.rules = rules
        self.placeholder_pattern = placeholder_pattern
        self.quoted_pattern = quoted_pattern
        self.type_name = source.type_name
        self.found: UsagesByName = {}

    def _usage(self, method: Node, body: str) -> Usage:
        source = self.source
        method_name = source.method_name(method)
        return Usage(
            containing_type_name=self.type_name,
            method_name=method_name,
            line_number=source.line(method),
            file_path=source.relative_path,
            context_description=build_usage_context(self.type_name, source.annotation_names(method)),
            purpose=classify_purpose(self.rules, self.type_name, method_name, body),
            code_snippet=source.method_signature(method),
        )

    def _record(self, names: Iterable[str], usage: Usage) -> None:
        for name in names:
            if name in self.catalog:
                self.found.setdefault(name, []).append(usage)

    def follow_value_fields(self) -> None:
        source = self.source
        for field in source.fields_with_annotation(VALUE_ANNOTATION):
            annotation = source.find_annotation(field, VALUE_ANNOTATION)
            content = source.annotation_argument(annotation) or ""
            bound = _ordered_unique(name for name, _, _ in find_placeholders(content))
            if not bound:
                continue

            for field_name, _ in source.field_declarators(field):
                for method in source.methods():
                    body = source.method_body_text(method)
                    if field_name and field_name in body:
                        self._record(bound, self._usage(method, body))

    def match_method_bodies(self) -> None:
        source = self.source
        for method in source.methods():
            body = source.method_body_text(method)
            matched = _ordered_unique(
                [m.group(1) for m in self.placeholder_pattern.finditer(body)]
                + [m.group(1) for m in self.quoted_pattern.finditer(body)]
            )
            if matched:
                self._record(matched, self._usage(method, body))

    def trace(self) -> UsagesByName:
        self.follow_value_fields()
        self.match_method_bodies()
        return self.found


def trace_usages(
    repo_root: str,
    catalog: VariableCatalog,
    rules: Tuple[PurposeRule, ...],
) -> VariableCatalog:
    """Attach usages to every variable in ``catalog``.

    Files that fail to parse were already recorded by the extraction pass
    and are skipped silently here.

    Args:
        repo_root: Repository root directory.
        catalog: Catalog built by the Definition Extractor (not frozen).
        rules: Rule table from ``build_purpose_rules()``.

    Returns:
        The same catalog, with deduplicated usages.
    """
    if len(catalog) == 0:
        logger.info("Catalog is empty; nothing to trace")
        return catalog

    repo_root = os.path.abspath(repo_root)
    placeholder_pattern, quoted_pattern = build_name_patterns(catalog.names())

    for source in iter_java_sources(repo_root, None, PHASE):
        found = _FileTracer(source, catalog, rules, placeholder_pattern, quoted_pattern).trace()
        for name, usages in found.items():
            catalog.extend_usages(name, usages)
        if found:
            logger.debug("Found usages of %d variables in %s", len(found), source.relative_path)

    total = 0
    for name in catalog.names():
        usages = dedup_usages(catalog[name].usages)
        catalog.replace_usages(name, usages)
        total += len(usages)

    logger.info("Traced %d usages across %d variables", total, len(catalog))
    return catalog
