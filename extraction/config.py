"""
Configuration constants for environment variable extraction.

Defines file classification, directory exclusions, config-file priorities and
the tree-sitter Java node type strings the syntax layer queries.
"""

from typing import Dict, FrozenSet, Set, Tuple

# ---------------------------------------------------------------------------
# File classification
# ---------------------------------------------------------------------------
JAVA_EXTENSIONS: Set[str] = {".java"}

YAML_EXTENSIONS: Set[str] = {".yml", ".yaml"}

PROPERTIES_EXTENSIONS: Set[str] = {".properties"}

CONFIG_EXTENSIONS: Set[str] = YAML_EXTENSIONS | PROPERTIES_EXTENSIONS

# Test sources and build output never contribute definitions or usages
EXCLUDED_DIR_NAMES: FrozenSet[str] = frozenset({
    "test",
    "tests",
    "target",
    "node_modules",
    "__pycache__",
})

# Gradle and IDE output, pruned only in a directory holding a build descriptor
BUILD_OUTPUT_DIR_NAMES: FrozenSet[str] = frozenset({
    "build",
    "out",
})

# Build descriptors marking the root of a module in a multi-module tree
MODULE_MARKER_FILES: Tuple[str, ...] = (
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
)

FALLBACK_MODULE_NAME: str = "root"

# ---------------------------------------------------------------------------
# Config file priorities (higher wins)
# ---------------------------------------------------------------------------
BASE_CONFIG_NAME: str = "application"
PROFILE_PREFIX: str = BASE_CONFIG_NAME + "-"

ROOT_PROPERTIES_PRIORITY: int = 200
ROOT_YAML_PRIORITY: int = 150
OTHER_PROPERTIES_PRIORITY: int = 100
OTHER_YAML_PRIORITY: int = 80
UNKNOWN_CONFIG_PRIORITY: int = 10
PROFILE_PRIORITY_BOOST: int = 1000

# ---------------------------------------------------------------------------
# Definition patterns
# ---------------------------------------------------------------------------
VALUE_ANNOTATION: str = "Value"
CONFIGURATION_PROPERTIES_ANNOTATION: str = "ConfigurationProperties"
CONFIGURATION_PROPERTIES_KEYS: Tuple[str, ...] = ("prefix", "value")

SYSTEM_RECEIVER: str = "System"
GETENV_METHOD: str = "getenv"
GET_PROPERTY_METHOD: str = "getProperty"

# Receiver substrings that mark an environment accessor (environment.getProperty)
ENVIRONMENT_RECEIVER_MARKERS: Tuple[str, ...] = ("env", "Environment")

UNKNOWN_MEMBER_NAME: str = "unknown"

# Lines of context before a YAML placeholder line kept in the snippet
YAML_SNIPPET_CONTEXT_LINES: int = 3

# ---------------------------------------------------------------------------
# tree-sitter-java node types
# ---------------------------------------------------------------------------
PACKAGE_NODE: str = "package_declaration"
CLASS_NODE: str = "class_declaration"
FIELD_NODE: str = "field_declaration"
METHOD_NODE: str = "method_declaration"
METHOD_CALL_NODE: str = "method_invocation"
MODIFIERS_NODE: str = "modifiers"
VARIABLE_DECLARATOR_NODE: str = "variable_declarator"
ELEMENT_VALUE_PAIR_NODE: str = "element_value_pair"
STRING_LITERAL_NODE: str = "string_literal"
CHARACTER_LITERAL_NODE: str = "character_literal"

ANNOTATION_NODES: Set[str] = {
    "annotation",
    "marker_annotation",
}

NAME_NODES: Set[str] = {
    "identifier",
    "scoped_identifier",
}

# Literal node type -> how its text maps to a default value
NUMERIC_LITERAL_NODES: Set[str] = {
    "decimal_integer_literal",
    "hex_integer_literal",
    "octal_integer_literal",
    "binary_integer_literal",
    "decimal_floating_point_literal",
    "hex_floating_point_literal",
}

BOOLEAN_LITERAL_NODES: Dict[str, str] = {
    "true": "true",
    "false": "false",
}

COMMENT_NODES: Set[str] = {
    "comment",
    "line_comment",
    "block_comment",
}
