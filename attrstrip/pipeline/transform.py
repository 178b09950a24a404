"""Attribute removal stage: find JSX attributes, excise the matching ones."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from tree_sitter import Node, QueryCursor

from attrstrip.models import ParsedSource, TransformResult
from attrstrip.pipeline.parse import (
    JSX_LANGUAGES,
    detect_language,
    get_compiled_query,
    parse_source_code,
)
from attrstrip.pipeline.position_map import PositionMap

logger = logging.getLogger(__name__)

ATTRIBUTE_QUERY = "(jsx_attribute) @attribute"

# Name node types of plain attributes; namespaced names (jsx_namespace_name) are skipped
SIMPLE_NAME_TYPES = frozenset({"property_identifier", "identifier", "jsx_identifier"})

NameMatcher = Callable[[str], bool]


@dataclass(frozen=True)
class Removal:
    """A byte range to excise, covering one attribute and its leading whitespace."""

    start_byte: int
    end_byte: int
    name: str


def get_attribute_name(node: Node) -> Optional[str]:
    """Return the attribute name when it is a simple identifier, else None."""
    name_node = node.named_children[0] if node.named_children else None
    if name_node is None or name_node.type not in SIMPLE_NAME_TYPES:
        return None
    return name_node.text.decode("utf-8") if name_node.text is not None else None


def find_attribute_nodes(parsed: ParsedSource) -> list[Node]:
    """Collect every JSX attribute node in the tree."""
    if parsed.language not in JSX_LANGUAGES:
        return []
    query = get_compiled_query(parsed.language, ATTRIBUTE_QUERY)  # type: ignore[arg-type]
    cursor = QueryCursor(query)

    nodes: list[Node] = []
    for _, captures_dict in cursor.matches(parsed.root_node):
        nodes.extend(captures_dict.get("attribute", []))
    return nodes


def _removal_start(node: Node, source: bytes) -> int:
    """Extend the removal back over whitespace separating it from the previous token."""
    previous = node.prev_sibling
    if previous is None:
        return node.start_byte
    gap = source[previous.end_byte : node.start_byte]
    if gap.strip():
        return node.start_byte
    return previous.end_byte


def _call_matcher(matcher: Any) -> NameMatcher:
    match_attribute = getattr(matcher, "match_attribute", None)
    if callable(match_attribute):
        return match_attribute
    return matcher


def collect_removals(parsed: ParsedSource, matcher: NameMatcher) -> list[Removal]:
    """
    Decide which attributes to remove.

    Attribute nodes are gathered first and excised later, so the tree is never
    mutated while it is being walked. Removals nested inside the value of an
    already removed attribute are dropped.

    Returns:
        Non-overlapping removals ordered by position
    """
    removals: list[Removal] = []
    for node in find_attribute_nodes(parsed):
        name = get_attribute_name(node)
        if name is None:
            continue
        if matcher(name):
            start = _removal_start(node, parsed.source)
            removals.append(Removal(start_byte=start, end_byte=node.end_byte, name=name))

    removals.sort(key=lambda removal: (removal.start_byte, -removal.end_byte))
    outermost: list[Removal] = []
    for removal in removals:
        if outermost and removal.start_byte < outermost[-1].end_byte:
            continue
        outermost.append(removal)
    return outermost


def _char_offsets(source: bytes, byte_offsets: list[int]) -> list[int]:
    """Convert sorted byte offsets into character offsets."""
    offsets = []
    previous_byte = 0
    previous_char = 0
    for byte_offset in byte_offsets:
        previous_char += len(source[previous_byte:byte_offset].decode("utf-8"))
        previous_byte = byte_offset
        offsets.append(previous_char)
    return offsets


def render(
    code: str,
    parsed: ParsedSource,
    removals: list[Removal],
    filename: Optional[str] = None,
    source_map: bool = False,
) -> TransformResult:
    """Re-render source text with the removals applied."""
    source = parsed.source
    kept: list[tuple[int, int]] = []
    cursor = 0
    for removal in removals:
        kept.append((cursor, removal.start_byte))
        cursor = removal.end_byte
    kept.append((cursor, len(source)))

    output = b"".join(source[start:end] for start, end in kept).decode("utf-8")

    position_map = None
    if source_map:
        boundaries = _char_offsets(source, [offset for span in kept for offset in span])
        positions = PositionMap()
        for index in range(0, len(boundaries), 2):
            positions.add_segment(boundaries[index], boundaries[index + 1] - boundaries[index])
        position_map = positions.to_source_map(code, output, filename)

    return TransformResult(code=output, map=position_map, removed=len(removals))


def transform_code(
    code: Any,
    matcher: NameMatcher,
    filename: Optional[str] = None,
    source_map: bool = False,
) -> TransformResult:
    """
    Remove matching JSX attributes from source code.

    Args:
        code: Source text; anything that is not a non-empty string passes through
        matcher: An AttributeMatcher or any callable deciding on attribute names
        filename: File name or module id, used for dialect detection and map labels
        source_map: Whether to produce a source map when the code changes

    Returns:
        TransformResult whose code is the input object itself unless at least
        one attribute was removed. Sources that fail to parse pass through
        unchanged with ``parsed`` set to False.
    """
    if not code or not isinstance(code, str):
        return TransformResult(code=code)

    language = detect_language(filename)
    parsed = parse_source_code(code.encode("utf-8"), language)
    if parsed is None:
        return TransformResult(code=code, parsed=False)

    removals = collect_removals(parsed, _call_matcher(matcher))
    if not removals:
        return TransformResult(code=code)

    logger.debug(
        "Removing %d attribute(s) from %s: %s",
        len(removals),
        filename or "<anonymous>",
        ", ".join(sorted({removal.name for removal in removals})),
    )
    return render(code, parsed, removals, filename=filename, source_map=source_map)
