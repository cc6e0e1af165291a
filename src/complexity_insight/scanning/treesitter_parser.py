"""Tree-sitter parser wrapper.

Provides one interface for parsing TypeScript-family source with tree-sitter.
The scorer never touches tree-sitter objects directly; it consumes the
``SyntaxTree`` / ``SyntaxNode`` facade built here.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse("const x = 1;", "typescript")
    for node in tree.root.children():
        print(node.kind)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import PurePosixPath
from typing import Any

import tree_sitter
import tree_sitter_typescript

from ..exceptions import ParsingError, UnsupportedLanguageError
from .syntax import SyntaxNode, SyntaxTree

logger = logging.getLogger(__name__)

# language name -> grammar entry point in tree_sitter_typescript
_LANGUAGE_FUNCTIONS = {
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}

_TSX_SUFFIXES = {".tsx", ".jsx"}


def get_supported_languages() -> list[str]:
    """Get list of languages with installed grammars."""
    return list(_LANGUAGE_FUNCTIONS.keys())


def language_for_path(path: str) -> str:
    """Pick the grammar for a file path by its extension."""
    if PurePosixPath(path).suffix.lower() in _TSX_SUFFIXES:
        return "tsx"
    return "typescript"


class TreeSitterParser:
    """Wrapper around tree-sitter for the TypeScript grammars.

    Parsers are created lazily per language and reused across calls.
    """

    def __init__(self) -> None:
        self._parsers: dict[str, Any] = {}

    def _parser_for(self, language: str) -> Any:
        parser = self._parsers.get(language)
        if parser is not None:
            return parser

        lang_fn = _LANGUAGE_FUNCTIONS.get(language)
        if lang_fn is None:
            raise UnsupportedLanguageError(language, get_supported_languages())

        # tree-sitter >= 0.23 returns a PyCapsule; wrap in Language()
        lang_obj = tree_sitter.Language(lang_fn())
        parser = tree_sitter.Parser(lang_obj)
        self._parsers[language] = parser
        return parser

    def parse(self, code: str, language: str = "typescript", filename: str = "<source>") -> SyntaxTree:
        """Parse code and return the syntax facade.

        Args:
            code: Source text
            language: Language name ("typescript" or "tsx")
            filename: Name used in error messages and result metadata

        Returns:
            SyntaxTree wrapping the parsed root

        Raises:
            UnsupportedLanguageError: If no grammar is registered for language
            ParsingError: If the source contains syntax errors
        """
        parser = self._parser_for(language)
        source = code.encode("utf-8")
        tree = parser.parse(source)
        root = tree.root_node

        if root.has_error:
            reason = _describe_error(root)
            logger.debug("Parse failure in %s: %s", filename, reason)
            raise ParsingError(filename, language, reason)

        return SyntaxTree(root=SyntaxNode(root), filename=filename, language=language)

    def is_language_supported(self, language: str) -> bool:
        """Check if a language is supported."""
        return language in _LANGUAGE_FUNCTIONS


def _describe_error(root: Any) -> str:
    """Locate the first ERROR or missing node for a readable message."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR":
            return f"syntax error at line {node.start_point[0] + 1}"
        if node.is_missing:
            return f"missing '{node.type}' at line {node.start_point[0] + 1}"
        if node.has_error:
            stack.extend(reversed(node.children))
    return "syntax error"


@lru_cache(maxsize=1)
def _shared_parser() -> TreeSitterParser:
    return TreeSitterParser()


def parse_source(code: str, language: str = "typescript", filename: str = "<source>") -> SyntaxTree:
    """Parse source text with a process-wide parser instance."""
    return _shared_parser().parse(code, language, filename)
