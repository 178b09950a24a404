from pathlib import Path

import pytest
from tree_sitter import Node

from attrstrip.config import PluginSettings, get_settings, set_settings
from attrstrip.models import ParsedSource
from attrstrip.pipeline.parse import parse_source_code

fixtures_dir = Path(__file__).parent / "fixtures" / "tsx"
fixture_modal = fixtures_dir / "modal.jsx"
fixture_product_card = fixtures_dir / "product_card.tsx"


def load_fixture(path: Path) -> str:
    """Load a fixture file as text."""
    return path.read_text(encoding="utf-8")


def parse_tsx(source: str, language: str = "tsx") -> ParsedSource:
    """Parse source text, failing the test if it does not parse."""
    parsed = parse_source_code(source.encode("utf-8"), language)  # type: ignore[arg-type]
    assert parsed is not None, f"Failed to parse: {source!r}"
    return parsed


def find_nodes_by_type(node: Node, node_type: str) -> list[Node]:
    """Find all nodes of given type in tree, in document order."""
    found = [node] if node.type == node_type else []
    for child in node.children:
        found.extend(find_nodes_by_type(child, node_type))
    return found


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep tests independent of ATTRSTRIP_* variables and global settings."""
    for name in ("ATTRSTRIP_ATTRIBUTES", "ATTRSTRIP_INCLUDE", "ATTRSTRIP_EXCLUDE", "ATTRSTRIP_MODE"):
        monkeypatch.delenv(name, raising=False)

    original_settings = get_settings()
    set_settings(PluginSettings())

    yield

    set_settings(original_settings)
