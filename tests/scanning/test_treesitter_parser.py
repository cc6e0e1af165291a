"""Tests for the tree-sitter parser wrapper."""

import pytest

from complexity_insight.exceptions import ParsingError, UnsupportedLanguageError
from complexity_insight.scanning import (
    SyntaxTree,
    TreeSitterParser,
    get_supported_languages,
    language_for_path,
    parse_source,
)


class TestSupportedLanguages:
    def test_typescript_and_tsx(self):
        assert get_supported_languages() == ["typescript", "tsx"]

    def test_is_language_supported(self):
        parser = TreeSitterParser()
        assert parser.is_language_supported("typescript")
        assert not parser.is_language_supported("python")

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("src/app.ts", "typescript"),
            ("src/view.tsx", "tsx"),
            ("legacy/widget.jsx", "tsx"),
            ("lib/index.js", "typescript"),
            ("UPPER.TSX", "tsx"),
        ],
    )
    def test_language_for_path(self, path, expected):
        assert language_for_path(path) == expected


class TestParse:
    def test_parse_returns_syntax_tree(self):
        """parse() wraps the tree-sitter root in the facade."""
        tree = TreeSitterParser().parse("const x = 1;", "typescript", "x.ts")
        assert isinstance(tree, SyntaxTree)
        assert tree.root.kind == "program"
        assert tree.filename == "x.ts"
        assert tree.language == "typescript"

    def test_parser_is_reused_per_language(self):
        parser = TreeSitterParser()
        parser.parse("let a = 1;")
        first = parser._parsers["typescript"]
        parser.parse("let b = 2;")
        assert parser._parsers["typescript"] is first

    def test_tsx_parses_jsx(self):
        tree = parse_source("const el = <div>hi</div>;", "tsx")
        assert tree.root.children()[0].kind == "lexical_declaration"

    def test_empty_source(self):
        tree = parse_source("")
        assert tree.root.kind == "program"
        assert tree.root.children() == []

    def test_malformed_source_raises(self, load_fixture):
        with pytest.raises(ParsingError) as exc_info:
            parse_source(load_fixture("broken.ts"), filename="broken.ts")
        assert exc_info.value.filepath == "broken.ts"
        assert exc_info.value.language == "typescript"
        assert "line" in exc_info.value.reason

    def test_unknown_language_raises(self):
        with pytest.raises(UnsupportedLanguageError) as exc_info:
            parse_source("x = 1", "python")
        assert exc_info.value.supported_languages == ["typescript", "tsx"]

    @pytest.mark.parametrize("name", ["simple.ts", "medium.ts", "complex.ts"])
    def test_fixtures_parse_cleanly(self, load_fixture, name):
        tree = parse_source(load_fixture(name), filename=name)
        assert tree.root.children()
