"""
Query layer over a parsed Java compilation unit.

The Extractor and the Tracer never walk tree-sitter nodes themselves; they ask
a ``JavaSource`` for fields, classes, method calls and methods, and for text
and line information about the nodes it returns.
"""

import logging
import os
from typing import Callable, Iterable, List, Optional, Tuple, Union

from tree_sitter import Node, Tree

from extraction.config import (
    ANNOTATION_NODES,
    BOOLEAN_LITERAL_NODES,
    CHARACTER_LITERAL_NODE,
    CLASS_NODE,
    COMMENT_NODES,
    ELEMENT_VALUE_PAIR_NODE,
    FIELD_NODE,
    METHOD_CALL_NODE,
    METHOD_NODE,
    MODIFIERS_NODE,
    NAME_NODES,
    NUMERIC_LITERAL_NODES,
    PACKAGE_NODE,
    STRING_LITERAL_NODE,
)
from extraction.parser import parse_file

logger = logging.getLogger(__name__)

NodePredicate = Callable[[Node], bool]


def annotation_matches(annotation_name: str, wanted: str) -> bool:
    """``@Value`` and ``@org.springframework...Value`` both match ``Value``."""
    return annotation_name == wanted or annotation_name.endswith("." + wanted)


class JavaSource:
    """A parsed Java file plus the queries the extraction passes need.

    Attributes:
        path: Absolute path on disk.
        relative_path: Path relative to the repository root, ``/`` separated.
        tree: tree-sitter syntax tree.
        source_bytes: Raw file bytes the tree was parsed from.
    """

    def __init__(self, path: str, relative_path: str, tree: Tree, source_bytes: bytes):
        self.path = path
        self.relative_path = relative_path
        self.tree = tree
        self.source_bytes = source_bytes
        self._methods: Optional[List[Node]] = None

    @classmethod
    def from_file(cls, path: str, relative_path: str) -> "JavaSource":
        tree, source_bytes = parse_file(path)
        return cls(path, relative_path, tree, source_bytes)

    @property
    def has_syntax_errors(self) -> bool:
        return self.tree.root_node.has_error

    # ------------------------------------------------------------------
    # Generic node access
    # ------------------------------------------------------------------

    def text(self, node: Optional[Node]) -> str:
        if node is None:
            return ""
        return self.source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def line(node: Node) -> int:
        """1-indexed start line of ``node``."""
        return node.start_point.row + 1

    def find_nodes(self, match: Union[str, Iterable[str], NodePredicate], root: Optional[Node] = None) -> List[Node]:
        """Return every node under ``root`` matching a kind, kinds, or predicate.

        Nodes come back in document order (pre-order traversal).
        """
        if isinstance(match, str):
            kinds = {match}
            predicate: NodePredicate = lambda n: n.type in kinds
        elif callable(match):
            predicate = match
        else:
            kinds = set(match)
            predicate = lambda n: n.type in kinds

        found: List[Node] = []
        stack: List[Node] = [root if root is not None else self.tree.root_node]
        while stack:
            node = stack.pop()
            if predicate(node):
                found.append(node)
            stack.extend(reversed(node.named_children))
        return found

    # ------------------------------------------------------------------
    # Type information
    # ------------------------------------------------------------------

    @property
    def package_name(self) -> str:
        for node in self.tree.root_node.named_children:
            if node.type != PACKAGE_NODE:
                continue
            for child in node.named_children:
                if child.type in NAME_NODES:
                    return self.text(child)
        return ""

    @property
    def type_name(self) -> str:
        """Package-qualified primary type name (package + file stem)."""
        primary = os.path.splitext(os.path.basename(self.path))[0]
        package = self.package_name
        return f"{package}.{primary}" if package else primary

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def annotations(self, declaration: Node) -> List[Node]:
        """Annotations attached to a class, field or method declaration."""
        result: List[Node] = []
        for child in declaration.named_children:
            if child.type == MODIFIERS_NODE:
                result.extend(c for c in child.named_children if c.type in ANNOTATION_NODES)
        return result

    def annotation_name(self, annotation: Node) -> str:
        return self.text(annotation.child_by_field_name("name"))

    def annotation_names(self, declaration: Node) -> List[str]:
        """Simple names of every annotation on ``declaration``."""
        return [self.annotation_name(a).rsplit(".", 1)[-1] for a in self.annotations(declaration)]

    def find_annotation(self, declaration: Node, name: str) -> Optional[Node]:
        for annotation in self.annotations(declaration):
            if annotation_matches(self.annotation_name(annotation), name):
                return annotation
        return None

    def annotation_argument(self, annotation: Node, keys: Tuple[str, ...] = ("value",)) -> Optional[str]:
        """Text of an annotation argument with double quotes removed.

        A single-member annotation (``@Value("${X}")``) returns its only
        argument; a normal annotation returns the first pair whose key is in
        ``keys``, checked in ``keys`` order.
        """
        arguments = annotation.child_by_field_name("arguments")
        if arguments is None:
            return None

        pairs = [c for c in arguments.named_children if c.type == ELEMENT_VALUE_PAIR_NODE]
        if not pairs:
            values = [c for c in arguments.named_children if c.type not in COMMENT_NODES]
            if not values:
                return None
            return self.text(values[0]).replace('"', "")

        for key in keys:
            for pair in pairs:
                if self.text(pair.child_by_field_name("key")) == key:
                    return self.text(pair.child_by_field_name("value")).replace('"', "")
        return None

    def classes_with_annotation(self, name: str) -> List[Node]:
        return [
            node for node in self.find_nodes(CLASS_NODE)
            if self.find_annotation(node, name) is not None
        ]

    def fields_with_annotation(self, name: str) -> List[Node]:
        return [
            node for node in self.find_nodes(FIELD_NODE)
            if self.find_annotation(node, name) is not None
        ]

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def class_fields(self, class_node: Node) -> List[Node]:
        """Field declarations directly inside ``class_node``'s body."""
        body = class_node.child_by_field_name("body")
        if body is None:
            return []
        return [c for c in body.named_children if c.type == FIELD_NODE]

    def field_declarators(self, field: Node) -> List[Tuple[str, Optional[Node]]]:
        """``(name, initializer)`` for every variable declared by ``field``."""
        declarators = []
        for declarator in field.children_by_field_name("declarator"):
            name = self.text(declarator.child_by_field_name("name"))
            declarators.append((name, declarator.child_by_field_name("value")))
        return declarators

    # ------------------------------------------------------------------
    # Literals
    # ------------------------------------------------------------------

    def string_literal_value(self, node: Optional[Node]) -> Optional[str]:
        """Content of a plain ``"..."`` literal, escapes left as written."""
        if node is None or node.type != STRING_LITERAL_NODE:
            return None
        text = self.text(node)
        if text.startswith('"""') or len(text) < 2:
            return None
        return text[1:-1]

    def literal_value(self, node: Optional[Node]) -> Optional[str]:
        """String form of a simple literal, or None for anything else."""
        if node is None:
            return None
        if node.type == STRING_LITERAL_NODE:
            return self.string_literal_value(node)
        if node.type in BOOLEAN_LITERAL_NODES:
            return BOOLEAN_LITERAL_NODES[node.type]
        if node.type in NUMERIC_LITERAL_NODES:
            return self.text(node)
        if node.type == CHARACTER_LITERAL_NODE:
            return self.text(node)[1:-1]
        return None

    # ------------------------------------------------------------------
    # Method calls
    # ------------------------------------------------------------------

    def method_calls(self, method_name: str) -> List[Node]:
        return [
            node for node in self.find_nodes(METHOD_CALL_NODE)
            if self.text(node.child_by_field_name("name")) == method_name
        ]

    def call_receiver(self, call: Node) -> Optional[str]:
        receiver = call.child_by_field_name("object")
        if receiver is None:
            return None
        return self.text(receiver)

    def call_arguments(self, call: Node) -> List[Node]:
        arguments = call.child_by_field_name("arguments")
        if arguments is None:
            return []
        return [c for c in arguments.named_children if c.type not in COMMENT_NODES]

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    def methods(self) -> List[Node]:
        """Every method declaration in the file, nested types included."""
        if self._methods is None:
            self._methods = self.find_nodes(METHOD_NODE)
        return self._methods

    def method_name(self, method: Node) -> str:
        return self.text(method.child_by_field_name("name"))

    def method_body_text(self, method: Node) -> str:
        return self.text(method.child_by_field_name("body"))

    def containing_method(self, byte_offset: int) -> Optional[Node]:
        """Innermost method declaration whose span contains ``byte_offset``."""
        best: Optional[Node] = None
        for method in self.methods():
            if method.start_byte <= byte_offset < method.end_byte:
                if best is None or (method.end_byte - method.start_byte) < (best.end_byte - best.start_byte):
                    best = method
        return best

    def method_signature(self, method: Node) -> str:
        """Annotations (one per line) followed by the declaration without its body."""
        lines = [self.text(a) for a in self.annotations(method)]

        keywords: List[str] = []
        declaration_start = method.start_byte
        for child in method.children:
            if child.type == MODIFIERS_NODE:
                keywords = [self.text(c) for c in child.children if not c.is_named]
                declaration_start = child.end_byte
                break

        body = method.child_by_field_name("body")
        declaration_end = body.start_byte if body is not None else method.end_byte
        rest = self.source_bytes[declaration_start:declaration_end].decode("utf-8", errors="replace")
        rest = " ".join(rest.split()).rstrip(";").strip()
        lines.append(" ".join(keywords + [rest]) if rest else " ".join(keywords))
        return "\n".join(lines)
