"""Shared test fixtures for Complexity Insight."""

import os
from pathlib import Path

import pytest

from complexity_insight.scanning import parse_source

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "typescript"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the TypeScript fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def load_fixture():
    """Read a fixture file by its path relative to the fixtures dir."""

    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture
def module_sources():
    """The three-file module graph: a <-> b (cycle), b -> c."""
    names = ["a.ts", "b.ts", "c.ts"]
    return {
        f"module_test/{name}": (FIXTURES_DIR / "module_test" / name).read_text(encoding="utf-8")
        for name in names
    }


@pytest.fixture
def first_expression():
    """Parse ``code`` and return the expression of its first statement."""

    def _first(code: str):
        tree = parse_source(code)
        statement = tree.root.children()[0]
        assert statement.kind == "expression_statement"
        return tree, statement.children()[0]

    return _first


@pytest.fixture
def first_statement():
    """Parse ``code`` and return its first top-level statement."""

    def _first(code: str):
        tree = parse_source(code)
        return tree, tree.root.children()[0]

    return _first


@pytest.fixture
def isolated_config_env(tmp_path, monkeypatch):
    """Keep user and project config files and COMPLEXITY_* vars out of a test."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for key in list(os.environ):
        if key.startswith("COMPLEXITY_"):
            monkeypatch.delenv(key, raising=False)
    return work
