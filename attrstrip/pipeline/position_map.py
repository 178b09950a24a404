"""Position mapping between transformed and original source text."""

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Optional

from attrstrip.models import SourceMap

_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def encode_vlq(value: int) -> str:
    """Encode a signed integer as a base64 VLQ string."""
    vlq = (-value << 1) | 1 if value < 0 else value << 1
    encoded = ""
    while True:
        digit = vlq & 0b11111
        vlq >>= 5
        if vlq:
            digit |= 0b100000
        encoded += _BASE64[digit]
        if not vlq:
            return encoded


def _line_starts(text: str) -> list[int]:
    starts = [0]
    index = text.find("\n")
    while index != -1:
        starts.append(index + 1)
        index = text.find("\n", index + 1)
    return starts


def _line_column(line_starts: list[int], offset: int) -> tuple[int, int]:
    line = bisect_right(line_starts, offset) - 1
    return line, offset - line_starts[line]


@dataclass
class PositionMap:
    """Kept segments of the original text, in output order.

    Each segment is ``(generated_offset, original_offset, length)`` in
    characters. Text between segments in the original was removed.
    """

    segments: list[tuple[int, int, int]] = field(default_factory=list)

    def add_segment(self, original_offset: int, length: int) -> None:
        """Append the next kept segment of the original text."""
        if length <= 0:
            return
        generated_offset = 0
        if self.segments:
            last_generated, _, last_length = self.segments[-1]
            generated_offset = last_generated + last_length
        self.segments.append((generated_offset, original_offset, length))

    @property
    def generated_length(self) -> int:
        if not self.segments:
            return 0
        generated_offset, _, length = self.segments[-1]
        return generated_offset + length

    def original_offset(self, generated_offset: int) -> Optional[int]:
        """Map an offset in the transformed text back to the original text."""
        starts = [segment[0] for segment in self.segments]
        index = bisect_right(starts, generated_offset) - 1
        if index < 0:
            return None
        start, original, length = self.segments[index]
        if generated_offset >= start + length:
            return None
        return original + generated_offset - start

    def _mapping_points(self, original: str) -> list[tuple[int, int]]:
        """Generated and original offsets that start a mapping segment."""
        points: list[tuple[int, int]] = []
        for generated_offset, original_offset, length in self.segments:
            points.append((generated_offset, original_offset))
            newline = original.find("\n", original_offset, original_offset + length)
            while newline != -1:
                relative = newline + 1 - original_offset
                if relative < length:
                    points.append((generated_offset + relative, newline + 1))
                newline = original.find("\n", newline + 1, original_offset + length)
        return points

    def encode_mappings(self, original: str, generated: str) -> str:
        """Encode the segments as source map ``mappings``."""
        original_lines = _line_starts(original)
        generated_lines = _line_starts(generated)

        lines: list[list[str]] = [[] for _ in generated_lines]
        previous_original_line = 0
        previous_original_column = 0
        current_line = -1
        previous_generated_column = 0

        for generated_offset, original_offset in self._mapping_points(original):
            generated_line, generated_column = _line_column(generated_lines, generated_offset)
            original_line, original_column = _line_column(original_lines, original_offset)
            if generated_line != current_line:
                current_line = generated_line
                previous_generated_column = 0
            lines[generated_line].append(
                encode_vlq(generated_column - previous_generated_column)
                + encode_vlq(0)
                + encode_vlq(original_line - previous_original_line)
                + encode_vlq(original_column - previous_original_column)
            )
            previous_generated_column = generated_column
            previous_original_line = original_line
            previous_original_column = original_column

        return ";".join(",".join(segments) for segments in lines)

    def to_source_map(
        self, original: str, generated: str, filename: Optional[str] = None
    ) -> SourceMap:
        """Build a version 3 source map for the transformed text."""
        source_name = filename or "<anonymous>"
        return SourceMap(
            file=filename,
            sources=[source_name],
            sources_content=[original],
            mappings=self.encode_mappings(original, generated),
        )
