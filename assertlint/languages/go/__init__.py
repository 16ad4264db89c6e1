"""Go front end: tree-sitter parsing and a package-level type checker."""

from __future__ import annotations

from assertlint.languages.go.check import TypesInfo, check_file, check_package
from assertlint.languages.go.extractors import find_go_files, imports_testify, is_test_file
from assertlint.languages.go.parser import parse_file
from assertlint.languages.go.syntax import GoSyntaxError
from assertlint.languages.go.treesitter import GoParserUnavailableError, get_go_parser

__all__ = [
    "GoParserUnavailableError",
    "GoSyntaxError",
    "TypesInfo",
    "check_file",
    "check_package",
    "find_go_files",
    "get_go_parser",
    "imports_testify",
    "is_test_file",
    "parse_file",
]
