"""Parse stage: dialect detection and tree-sitter parsing."""

import logging
from pathlib import PurePosixPath
from typing import Literal, Optional

from tree_sitter import Query
from tree_sitter_language_pack import get_language, get_parser

from attrstrip.models import ParsedSource

logger = logging.getLogger(__name__)

# Type alias for the tree-sitter grammars used for JavaScript-family sources
LanguageName = Literal["tsx", "typescript"]

# tsx accepts JSX together with the full TypeScript superset, and plain JavaScript
DEFAULT_LANGUAGE: LanguageName = "tsx"

# Mapping of file extensions to tree-sitter language names
LANGUAGE_MAP: dict[str, LanguageName] = {
    ".js": "tsx",
    ".jsx": "tsx",
    ".mjs": "tsx",
    ".cjs": "tsx",
    ".tsx": "tsx",
    # Plain TypeScript cannot contain JSX, and its grammar allows <T>expr casts
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
}

# Grammars that define jsx_attribute nodes
JSX_LANGUAGES: frozenset[str] = frozenset({"tsx"})

# Filled lazily without a lock; concurrent misses at worst compile a query twice
_compiled_queries: dict[tuple[str, str], Query] = {}


def strip_module_suffix(module_id: str) -> str:
    """Drop the ?query and #hash suffixes that build tools append to module ids."""
    for separator in ("?", "#"):
        index = module_id.find(separator)
        if index != -1:
            module_id = module_id[:index]
    return module_id


def detect_language(filename: Optional[str]) -> LanguageName:
    """
    Detect the tree-sitter grammar from a file name or module id.

    Args:
        filename: File name, path or module id; None for anonymous sources

    Returns:
        Language name, DEFAULT_LANGUAGE when the extension is unknown
    """
    if not filename:
        return DEFAULT_LANGUAGE
    suffix = PurePosixPath(strip_module_suffix(filename).replace("\\", "/")).suffix.lower()
    return LANGUAGE_MAP.get(suffix, DEFAULT_LANGUAGE)


def get_compiled_query(language: LanguageName, query_str: str) -> Query:
    """Get or compile a query for a language."""
    key = (language, query_str)
    if key not in _compiled_queries:
        _compiled_queries[key] = Query(get_language(language), query_str)
    return _compiled_queries[key]


def parse_source_code(source: bytes, language_name: LanguageName) -> Optional[ParsedSource]:
    """Parse source code using tree-sitter.

    Returns None when the source does not parse cleanly. Tree-sitter recovers
    from syntax errors instead of raising, so a tree containing error or
    missing nodes counts as a failure.
    """
    parser = get_parser(language_name)

    try:
        tree = parser.parse(source)
    except Exception:
        return None

    if tree.root_node.has_error:
        return None

    return ParsedSource(language=language_name, tree=tree, source=source)
