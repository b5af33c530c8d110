"""
Definition Extractor.

Finds every externally-configurable variable in a repository and records the
site where it was first discovered. Config files are scanned first, then Java
sources; within each group files are visited in traversal order and the first
definition of a name wins.
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from tree_sitter import Node

from core.naming import camel_to_kebab, find_placeholders, to_env_name
from extraction.config import (
    CONFIGURATION_PROPERTIES_ANNOTATION,
    CONFIGURATION_PROPERTIES_KEYS,
    ENVIRONMENT_RECEIVER_MARKERS,
    GET_PROPERTY_METHOD,
    GETENV_METHOD,
    SYSTEM_RECEIVER,
    UNKNOWN_MEMBER_NAME,
    VALUE_ANNOTATION,
    YAML_EXTENSIONS,
    YAML_SNIPPET_CONTEXT_LINES,
)
from extraction.defaults import PropertyDefaults
from extraction.diagnostics import AnalysisDiagnostics
from extraction.discovery import discover_config_files, relative_path, resolve_module_name
from extraction.extractor import iter_java_sources
from extraction.models import Definition, DefinitionKind, Variable, VariableCatalog
from extraction.syntax import JavaSource

logger = logging.getLogger(__name__)

PHASE = "extract-definitions"


def _variable(name: str, default: Optional[str], definition: Definition) -> Variable:
    return Variable(
        name=name,
        default_value=default,
        required=default is None,
        definition=definition,
    )


# ---------------------------------------------------------------------------
# Config files
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _ConfigFile:
    relative_path: str
    module_name: str
    text: str


def _first_line_containing(lines: List[str], needle: str) -> int:
    for index, line in enumerate(lines):
        if needle in line:
            return index + 1
    return 1


def _yaml_snippet(lines: List[str], line_number: int) -> str:
    end = min(len(lines), line_number)
    start = max(0, end - 1 - YAML_SNIPPET_CONTEXT_LINES)
    return "\n".join(lines[start:end]).strip()


def _scan_yaml(config: _ConfigFile) -> Iterator[Variable]:
    """Every placeholder in the file's full text."""
    lines = config.text.splitlines()
    for name, default, matched in find_placeholders(config.text):
        line_number = _first_line_containing(lines, matched)
        definition = Definition(
            kind=DefinitionKind.APPLICATION_YAML,
            file_path=config.relative_path,
            line_number=line_number,
            code_snippet=_yaml_snippet(lines, line_number),
            module_name=config.module_name,
        )
        yield _variable(name, default, definition)


def _scan_properties(config: _ConfigFile) -> Iterator[Variable]:
    """Every placeholder, line by line."""
    for index, line in enumerate(config.text.splitlines()):
        for name, default, _ in find_placeholders(line):
            definition = Definition(
                kind=DefinitionKind.APPLICATION_PROPERTIES,
                file_path=config.relative_path,
                line_number=index + 1,
                code_snippet=line.strip(),
                module_name=config.module_name,
            )
            yield _variable(name, default, definition)


ConfigScanner = Callable[[_ConfigFile], Iterator[Variable]]

CONFIG_SCANNERS: Dict[DefinitionKind, ConfigScanner] = {
    DefinitionKind.APPLICATION_YAML: _scan_yaml,
    DefinitionKind.APPLICATION_PROPERTIES: _scan_properties,
}


def _config_kind(file_path: str) -> DefinitionKind:
    if os.path.splitext(file_path)[1].lower() in YAML_EXTENSIONS:
        return DefinitionKind.APPLICATION_YAML
    return DefinitionKind.APPLICATION_PROPERTIES


# ---------------------------------------------------------------------------
# Java sources
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _SourceContext:
    source: JavaSource
    module_name: str
    defaults: PropertyDefaults

    def definition(
        self,
        kind: DefinitionKind,
        node: Node,
        member_name: Optional[str],
    ) -> Definition:
        return Definition(
            kind=kind,
            file_path=self.source.relative_path,
            line_number=self.source.line(node),
            code_snippet=self.source.text(node),
            module_name=self.module_name,
            containing_type_name=self.source.type_name,
            field_or_method_name=member_name,
        )

    def containing_method_name(self, node: Node) -> str:
        method = self.source.containing_method(node.start_byte)
        if method is None:
            return UNKNOWN_MEMBER_NAME
        return self.source.method_name(method)


def _extract_spring_value(ctx: _SourceContext) -> Iterator[Variable]:
    """Placeholders inside ``@Value`` on fields."""
    source = ctx.source
    for field in source.fields_with_annotation(VALUE_ANNOTATION):
        annotation = source.find_annotation(field, VALUE_ANNOTATION)
        content = source.annotation_argument(annotation)
        if not content:
            continue

        declarators = source.field_declarators(field)
        field_name = declarators[0][0] if declarators else UNKNOWN_MEMBER_NAME
        for name, default, _ in find_placeholders(content):
            definition = ctx.definition(DefinitionKind.SPRING_VALUE, field, field_name)
            yield _variable(name, default, definition)


def _extract_config_properties(ctx: _SourceContext) -> Iterator[Variable]:
    """Fields of classes bound by ``@ConfigurationProperties(prefix)``."""
    source = ctx.source
    for class_node in source.classes_with_annotation(CONFIGURATION_PROPERTIES_ANNOTATION):
        annotation = source.find_annotation(class_node, CONFIGURATION_PROPERTIES_ANNOTATION)
        prefix = source.annotation_argument(annotation, CONFIGURATION_PROPERTIES_KEYS)
        if not prefix:
            continue

        for field in source.class_fields(class_node):
            for field_name, initializer in source.field_declarators(field):
                property_name = f"{prefix}.{camel_to_kebab(field_name)}"
                default = ctx.defaults.lookup(property_name)
                if default is None:
                    default = ctx.defaults.lookup(f"{prefix}.{field_name}")
                if default is None:
                    default = source.literal_value(initializer)

                definition = ctx.definition(DefinitionKind.CONFIG_PROPERTIES, field, field_name)
                yield _variable(to_env_name(property_name), default, definition)


def _literal_arguments(ctx: _SourceContext, call: Node) -> Tuple[Optional[str], Optional[str]]:
    """First argument as a string literal, second as any simple literal."""
    arguments = ctx.source.call_arguments(call)
    if not arguments:
        return None, None
    first = ctx.source.string_literal_value(arguments[0])
    second = ctx.source.literal_value(arguments[1]) if len(arguments) > 1 else None
    return first, second


def _extract_system_getenv(ctx: _SourceContext) -> Iterator[Variable]:
    """``System.getenv("NAME")``; always required."""
    source = ctx.source
    for call in source.method_calls(GETENV_METHOD):
        if source.call_receiver(call) != SYSTEM_RECEIVER:
            continue
        for argument in source.call_arguments(call):
            name = source.string_literal_value(argument)
            if name is None:
                continue
            definition = ctx.definition(
                DefinitionKind.SYSTEM_GETENV, call, ctx.containing_method_name(call)
            )
            yield Variable(name=name, default_value=None, required=True, definition=definition)


def _extract_system_property(ctx: _SourceContext) -> Iterator[Variable]:
    """``System.getProperty("a.b"[, fallback])``."""
    source = ctx.source
    for call in source.method_calls(GET_PROPERTY_METHOD):
        if source.call_receiver(call) != SYSTEM_RECEIVER:
            continue
        property_name, default = _literal_arguments(ctx, call)
        if property_name is None:
            continue
        definition = ctx.definition(
            DefinitionKind.SYSTEM_PROPERTY, call, ctx.containing_method_name(call)
        )
        yield _variable(to_env_name(property_name), default, definition)


def _is_environment_receiver(receiver: Optional[str]) -> bool:
    if not receiver or receiver == SYSTEM_RECEIVER:
        return False
    return any(marker in receiver for marker in ENVIRONMENT_RECEIVER_MARKERS)


def _extract_environment_api(ctx: _SourceContext) -> Iterator[Variable]:
    """``environment.getProperty("a.b"[, fallback])`` on a Spring Environment."""
    source = ctx.source
    for call in source.method_calls(GET_PROPERTY_METHOD):
        if not _is_environment_receiver(source.call_receiver(call)):
            continue
        property_name, default = _literal_arguments(ctx, call)
        if property_name is None:
            continue

        placeholders = find_placeholders(property_name)
        name = placeholders[0][0] if placeholders else to_env_name(property_name)
        definition = ctx.definition(
            DefinitionKind.ENVIRONMENT_API, call, ctx.containing_method_name(call)
        )
        yield _variable(name, default, definition)


SourceExtractor = Callable[[_SourceContext], Iterator[Variable]]

# Applied to every source file in this order
SOURCE_EXTRACTORS: Dict[DefinitionKind, SourceExtractor] = {
    DefinitionKind.SPRING_VALUE: _extract_spring_value,
    DefinitionKind.CONFIG_PROPERTIES: _extract_config_properties,
    DefinitionKind.SYSTEM_GETENV: _extract_system_getenv,
    DefinitionKind.SYSTEM_PROPERTY: _extract_system_property,
    DefinitionKind.ENVIRONMENT_API: _extract_environment_api,
}

_unhandled = set(DefinitionKind) - set(CONFIG_SCANNERS) - set(SOURCE_EXTRACTORS)
if _unhandled:
    raise RuntimeError(f"No extractor registered for: {sorted(k.value for k in _unhandled)}")


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def _add_all(catalog: VariableCatalog, variables: Iterator[Variable]) -> int:
    added = 0
    for variable in variables:
        if catalog.add_if_absent(variable):
            added += 1
        else:
            logger.debug("Ignoring later definition of %s at %s:%d",
                         variable.name, variable.definition.file_path, variable.definition.line_number)
    return added


def extract_from_config_files(
    repo_root: str,
    catalog: VariableCatalog,
    diagnostics: Optional[AnalysisDiagnostics] = None,
) -> None:
    """Add every placeholder found in YAML and properties files."""
    for file_path in discover_config_files(repo_root):
        relative = relative_path(file_path, repo_root)
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            if diagnostics is not None:
                diagnostics.record_failure(relative, PHASE, f"Cannot read file: {e}")
            continue

        if diagnostics is not None:
            diagnostics.record_processed()

        config = _ConfigFile(
            relative_path=relative,
            module_name=resolve_module_name(repo_root, file_path),
            text=text,
        )
        kind = _config_kind(file_path)
        added = _add_all(catalog, CONFIG_SCANNERS[kind](config))
        logger.debug("Found %d new variables in %s", added, relative)


def extract_from_sources(
    repo_root: str,
    catalog: VariableCatalog,
    defaults: PropertyDefaults,
    diagnostics: Optional[AnalysisDiagnostics] = None,
) -> None:
    """Add every variable bound or looked up in Java sources."""
    for source in iter_java_sources(repo_root, diagnostics, PHASE):
        ctx = _SourceContext(
            source=source,
            module_name=resolve_module_name(repo_root, source.path),
            defaults=defaults,
        )
        added = 0
        for extractor in SOURCE_EXTRACTORS.values():
            added += _add_all(catalog, extractor(ctx))
        logger.debug("Found %d new variables in %s", added, source.relative_path)


def extract_definitions(
    repo_root: str,
    defaults: Optional[PropertyDefaults] = None,
    diagnostics: Optional[AnalysisDiagnostics] = None,
) -> VariableCatalog:
    """Build a catalog of every variable defined in ``repo_root``.

    Args:
        repo_root: Repository root directory.
        defaults: Resolved property defaults; empty if not given.
        diagnostics: Collector for processed and failed files.

    Returns:
        A mutable VariableCatalog with no usages attached yet.
    """
    repo_root = os.path.abspath(repo_root)
    catalog = VariableCatalog()
    defaults = defaults if defaults is not None else PropertyDefaults()

    extract_from_config_files(repo_root, catalog, diagnostics)
    config_count = len(catalog)
    extract_from_sources(repo_root, catalog, defaults, diagnostics)

    logger.info(
        "Extracted %d variables (%d from config files, %d from sources)",
        len(catalog),
        config_count,
        len(catalog) - config_count,
    )
    return catalog
