"""Data models for explicit-folding."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol, runtime_checkable


class MatchKind(Enum):
    """Kinds of markers recognised while scanning a line.

    Attributes:
        BEGIN: Opens a foldable region.
        END: Closes the innermost compatible open region.
        SKIP_LINE: Cancels matching for the remainder of the line.
    """

    BEGIN = auto()
    END = auto()
    SKIP_LINE = auto()


@dataclass(frozen=True)
class CompiledPattern:
    """A folding rule ready for scanning.

    Attributes:
        index: Position of the rule among the compiled patterns; used as its identity.
        begin: Pattern opening a region.
        end: Pattern closing a region.
        skip_line: Pattern cancelling the rest of a line, or None.
        skip_begin: Pattern vetoing a range when found on its begin line, or None.
        skip_end: Pattern vetoing a range when found on its end line, or None.
        offset_top: Adjustment applied to the emitted start line.
        offset_bottom: Adjustment applied to the emitted end line.
    """

    index: int
    begin: re.Pattern[str]
    end: re.Pattern[str]
    skip_line: re.Pattern[str] | None = None
    skip_begin: re.Pattern[str] | None = None
    skip_end: re.Pattern[str] | None = None
    offset_top: int = 0
    offset_bottom: int = 0


@dataclass(frozen=True)
class LineMatch:
    """A single tagged match found on a line.

    Attributes:
        kind: Which marker of `pattern` matched.
        pattern: Rule that produced the match.
        start: Zero-based column where the match starts.
        end: Zero-based column just past the match.
    """

    kind: MatchKind
    pattern: CompiledPattern
    start: int
    end: int


@dataclass
class OpenMarker:
    """A begin marker waiting for its end."""

    pattern: CompiledPattern
    line_index: int


@dataclass(frozen=True, order=True)
class FoldingRange:
    """Inclusive, zero-based range of lines that can be collapsed.

    Attributes:
        start_line: First line of the range.
        end_line: Last line of the range.
    """

    start_line: int
    end_line: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.start_line, self.end_line)


@runtime_checkable
class Document(Protocol):
    """Line-addressable text snapshot consumed by the scanner."""

    @property
    def line_count(self) -> int: ...

    def line_at(self, index: int) -> str: ...


@dataclass
class TextDocument:
    """In-memory `Document` built from text.

    Attributes:
        lines: Lines of the document without line terminators.
        path: Source of the text, when it came from a file.
    """

    lines: list[str] = field(default_factory=list)
    path: str | None = None

    @classmethod
    def from_text(cls, content: str, path: str | None = None) -> TextDocument:
        return cls(lines=content.splitlines(), path=path)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line_at(self, index: int) -> str:
        return self.lines[index]


DocumentLike = Document | Sequence[str]
