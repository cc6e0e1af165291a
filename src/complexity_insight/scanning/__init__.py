"""Syntax facade: tree-sitter parsing for TypeScript-family sources."""

from .syntax import SyntaxNode, SyntaxTree
from .treesitter_parser import (
    TreeSitterParser,
    get_supported_languages,
    language_for_path,
    parse_source,
)

__all__ = [
    "SyntaxNode",
    "SyntaxTree",
    "TreeSitterParser",
    "get_supported_languages",
    "language_for_path",
    "parse_source",
]
