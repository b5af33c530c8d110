"""
Unit tests for parser.py

Tests tree-sitter parser initialization, byte parsing, and file parsing.
"""

import os
import tempfile
import unittest

from extraction.parser import count_error_nodes, create_parser, parse_bytes, parse_file


class TestParserInitialization(unittest.TestCase):
    """Test parser creation and initialization."""

    def test_create_parser(self):
        parser = create_parser()
        self.assertIsNotNone(parser)
        self.assertIsNotNone(parser.language)


class TestParseBytes(unittest.TestCase):
    """Test parsing raw bytes of Java code."""

    def test_parse_simple_class(self):
        tree = parse_bytes(b"package com.example; public class A { void run() {} }")
        self.assertEqual(tree.root_node.type, "program")
        self.assertFalse(tree.root_node.has_error)

    def test_parse_empty(self):
        tree = parse_bytes(b"")
        self.assertEqual(tree.root_node.type, "program")

    def test_parse_rejects_str(self):
        with self.assertRaises(TypeError):
            parse_bytes("class A {}")

    def test_count_error_nodes(self):
        clean = parse_bytes(b"class A { int x = 1; }")
        self.assertEqual(count_error_nodes(clean), 0)

        broken = parse_bytes(b"class A { void run( { }")
        self.assertTrue(broken.root_node.has_error)
        self.assertGreater(count_error_nodes(broken), 0)


class TestParseFile(unittest.TestCase):
    """Test parsing files from disk."""

    def test_parse_file_returns_tree_and_bytes(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "A.java")
            with open(path, "wb") as f:
                f.write(b"class A {}")
            tree, source = parse_file(path)
            self.assertEqual(source, b"class A {}")
            self.assertEqual(tree.root_node.type, "program")

    def test_syntax_errors_returned_without_warning(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "Broken.java")
            with open(path, "wb") as f:
                f.write(b"class Broken { void run( { }")
            with self.assertNoLogs("extraction.parser", level="WARNING"):
                tree, _ = parse_file(path)
            self.assertTrue(tree.root_node.has_error)

    def test_parse_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            parse_file("/definitely/missing/A.java")


if __name__ == "__main__":
    unittest.main()
