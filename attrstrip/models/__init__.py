"""Domain models."""

from .transform import ParsedSource, SourceMap, TransformOutput, TransformResult

__all__ = ["ParsedSource", "SourceMap", "TransformOutput", "TransformResult"]
