"""
Tree-sitter parser initialization and file parsing utilities.

This module provides functions to initialize the Java parser and parse source files.
"""

import logging
from typing import Tuple
import tree_sitter_java as tsjava
from tree_sitter import Language, Node, Parser, Tree

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constant
JAVA_LANGUAGE = Language(tsjava.language())


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for Java.

    Returns:
        A Parser instance configured with the Java language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"class A {}")
    """
    parser = Parser(JAVA_LANGUAGE)
    logger.debug("Created tree-sitter Java parser")
    return parser


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of Java source code.

    Args:
        source: UTF-8 encoded bytes of Java source code.

    Returns:
        A Tree object representing the parsed AST.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"class A {}")
        >>> tree.root_node.type
        'program'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    parser = create_parser()
    tree = parser.parse(source)

    logger.debug(f"Parsed {len(source)} bytes of Java code")
    return tree


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Parse a Java source file from disk.

    Read failures and syntax errors are left to the caller to report; a
    tree with syntax errors is still returned.

    Args:
        file_path: Path to the .java file.

    Returns:
        A tuple of (Tree, source_bytes).

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
    """
    with open(file_path, "rb") as f:
        source_bytes = f.read()

    tree = parse_bytes(source_bytes)
    logger.debug(f"Parsed file: {file_path}")
    return tree, source_bytes


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and missing nodes in a parsed tree."""
    count = 0
    stack: list[Node] = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            count += 1
        if node.has_error:
            stack.extend(node.children)
    return count
