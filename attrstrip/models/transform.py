"""Transform domain models."""

import json
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from tree_sitter import Node, Tree


class ParsedSource(BaseModel):
    """A successfully parsed chunk of source code."""

    model_config = {"arbitrary_types_allowed": True}

    language: str = Field(description="Tree-sitter grammar used to parse the source")
    tree: Tree = Field(description="Tree-sitter AST")
    source: bytes = Field(description="Original source code bytes")

    @property
    def root_node(self) -> Node:
        """Get the root node of the AST."""
        return self.tree.root_node


class SourceMap(BaseModel):
    """Version 3 source map relating transformed code to the original."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = Field(default=3, description="Source map format version")
    file: Optional[str] = Field(default=None, description="Name of the generated file")
    sources: list[str] = Field(default_factory=list, description="Original source names")
    sources_content: list[Optional[str]] = Field(
        default_factory=list,
        alias="sourcesContent",
        description="Original source text, one entry per source",
    )
    names: list[str] = Field(default_factory=list, description="Symbol names (unused)")
    mappings: str = Field(default="", description="Base64 VLQ encoded mappings")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class TransformResult:
    """Result of transforming one chunk of source code.

    ``code`` is the input object itself whenever nothing was removed.
    """

    code: Any
    map: Optional[SourceMap] = None
    removed: int = 0
    parsed: bool = True

    @property
    def changed(self) -> bool:
        return self.removed > 0


@dataclass(frozen=True)
class TransformOutput:
    """Changed code handed back to the build pipeline."""

    code: str
    map: Optional[SourceMap] = None
    removed: int = 0
