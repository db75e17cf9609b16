"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from ngx_patcher.core.ast import SourceDocument
from ngx_patcher.core.edits import apply_edits
from ngx_patcher.models import TextEdit
from ngx_patcher.tree import InMemoryFileTree

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def typescript_parser() -> Parser:
    """Return a tree-sitter parser for TypeScript."""
    return get_parser("typescript")


@pytest.fixture
def assert_parses(typescript_parser: Parser) -> Callable[[str], None]:
    """Return a checker failing when the text has a syntax error."""

    def _check(text: str) -> None:
        tree = typescript_parser.parse(text.encode("utf-8"))
        assert not tree.root_node.has_error, text

    return _check


@pytest.fixture
def patch_text() -> Callable[[str, list[TextEdit]], str]:
    """Return a helper applying edits to the text they were computed against."""

    def _patch(text: str, edits: list[TextEdit]) -> str:
        return apply_edits(text, edits)

    return _patch


@pytest.fixture
def parse() -> Callable[..., SourceDocument]:
    """Return a helper parsing TypeScript text as ``src/file.ts``."""

    def _parse(text: str, path: str = "src/file.ts") -> SourceDocument:
        return SourceDocument.parse(path, text)

    return _parse


@pytest.fixture
def memory_tree() -> InMemoryFileTree:
    return InMemoryFileTree()
