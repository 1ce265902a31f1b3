"""Line-oriented scanning of documents into folding ranges."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Sequence

from .models import (
    CompiledPattern,
    Document,
    DocumentLike,
    FoldingRange,
    LineMatch,
    MatchKind,
    OpenMarker,
)

_UNSEARCHED = object()


class CombinedMatcher:
    """Tests every rule's markers at once, left to right.

    Alternatives are kept in rule order, and for each rule in the order begin,
    end, skip-line. A search returns the match that starts earliest on the
    line; when several alternatives start at the same column the one declared
    first wins, which is how a single alternation regex would behave.

    Args:
        patterns: Compiled rules, in priority order.

    Examples:
        matcher = CombinedMatcher(compile_patterns({"begin": "{", "end": "}"}))
        matcher.search("a { b }", 0).kind  # MatchKind.BEGIN
    """

    def __init__(self, patterns: Sequence[CompiledPattern]):
        self.patterns = tuple(patterns)
        alternatives: list[tuple[MatchKind, CompiledPattern, re.Pattern[str]]] = []
        for pattern in self.patterns:
            alternatives.append((MatchKind.BEGIN, pattern, pattern.begin))
            alternatives.append((MatchKind.END, pattern, pattern.end))
            if pattern.skip_line is not None:
                alternatives.append((MatchKind.SKIP_LINE, pattern, pattern.skip_line))
        self._alternatives = tuple(alternatives)

    def new_cache(self) -> list[re.Match[str] | None | object]:
        """Return an empty per-line cache for `search`."""
        return [_UNSEARCHED] * len(self._alternatives)

    def search(
        self, line: str, pos: int = 0, cache: list[re.Match[str] | None | object] | None = None
    ) -> LineMatch | None:
        """Find the leftmost marker in `line` at or after column `pos`.

        When a `cache` from `new_cache` is passed, each alternative's last
        result on this line is reused while it still starts at or after
        `pos`, so a left-to-right walk searches each stretch of the line
        only once per alternative. The cache must not be shared between
        lines.
        """
        best: LineMatch | None = None
        for slot, (kind, pattern, regex) in enumerate(self._alternatives):
            found = _UNSEARCHED if cache is None else cache[slot]
            if found is _UNSEARCHED or (found is not None and found.start() < pos):
                found = regex.search(line, pos)
                if cache is not None:
                    cache[slot] = found
            if found is None:
                # No match from an earlier column means none from `pos` either.
                continue
            if best is None or found.start() < best.start:
                best = LineMatch(kind, pattern, found.start(), found.end())
                if best.start == pos:
                    # Nothing can start earlier, and later alternatives lose ties.
                    break
        return best


def iter_line_matches(line: str, matcher: CombinedMatcher) -> Iterator[LineMatch]:
    """Yield the markers found on `line` in left-to-right order.

    After each match the cursor moves past the matched text; an empty match
    still advances by one column so the scan always terminates.

    Args:
        line: Text of a single line.
        matcher: Matcher built from the active rules.

    Yields:
        LineMatch: Tagged matches, ordered by column.

    Examples:
        [m.kind for m in iter_line_matches("{ }", matcher)]  # [BEGIN, END]
    """
    cache = matcher.new_cache()
    pos = 0
    while pos <= len(line):
        match = matcher.search(line, pos, cache)
        if match is None:
            return
        yield match
        pos = match.start + max(match.end - match.start, 1)


def line_accessor(document: DocumentLike | str) -> tuple[int, Callable[[int], str]]:
    """Return the line count of `document` and a function reading one line by index."""
    if isinstance(document, Document):
        return document.line_count, document.line_at
    if isinstance(document, str):
        document = document.splitlines()
    return len(document), document.__getitem__


def _find_open_marker(stack: list[OpenMarker], pattern: CompiledPattern) -> int | None:
    """Return the stack position of the innermost marker opened by `pattern`."""
    for position in range(len(stack) - 1, -1, -1):
        if stack[position].pattern.index == pattern.index:
            return position
    return None


def _is_vetoed(
    pattern: CompiledPattern, begin_line: int, end_line: int, line_at: Callable[[int], str]
) -> bool:
    if pattern.skip_begin is not None and pattern.skip_begin.search(line_at(begin_line)):
        return True
    if pattern.skip_end is not None and pattern.skip_end.search(line_at(end_line)):
        return True
    return False


def _close_marker(
    stack: list[OpenMarker],
    pattern: CompiledPattern,
    line_index: int,
    line_at: Callable[[int], str],
) -> FoldingRange | None:
    """Resolve an end marker against the open-marker stack.

    Mutates `stack` and returns the range to emit, if any.
    """
    position = len(stack) - 1
    top = stack[position]

    if top.line_index != line_index and top.pattern.index != pattern.index:
        found = _find_open_marker(stack, pattern)
        if found is None:
            # No open region of this rule anywhere; the end is abandoned.
            return None
        position = found
        top = stack[position]

    # Markers above the resolved one are abandoned along with it.
    del stack[position:]

    if top.line_index == line_index:
        return None
    if _is_vetoed(pattern, top.line_index, line_index, line_at):
        return None
    return FoldingRange(
        top.line_index + top.pattern.offset_top,
        line_index - 1 + top.pattern.offset_bottom,
    )


def scan_document(
    document: DocumentLike | str, patterns: Sequence[CompiledPattern]
) -> list[FoldingRange]:
    """Compute folding ranges for a document.

    Walks the document line by line, pushing a marker for every begin match
    and closing the innermost compatible marker on every end match. An end
    that belongs to a different rule than the innermost marker closes the
    nearest marker of its own rule and abandons everything opened after it.
    Begin and end on the same line never fold, unterminated begins are
    dropped at end of document, and skip markers cancel lines or veto ranges.

    Ranges are not clamped to the document; see `clamp_ranges`.

    Args:
        document: A `Document`, a sequence of line strings, or raw text.
        patterns: Rules produced by `compile_patterns`.

    Returns:
        list[FoldingRange]: Ranges in the order they were closed.

    Examples:
        scan_document(["a {", "b", "c }", "d"], compile_patterns({"begin": "{", "end": "}"}))
        # [FoldingRange(start_line=0, end_line=1)]
    """
    line_count, line_at = line_accessor(document)
    if not patterns:
        return []

    matcher = CombinedMatcher(patterns)
    ranges: list[FoldingRange] = []
    stack: list[OpenMarker] = []

    for line_index in range(line_count):
        for match in iter_line_matches(line_at(line_index), matcher):
            if match.kind is MatchKind.SKIP_LINE:
                break

            if match.kind is MatchKind.BEGIN:
                stack.append(OpenMarker(match.pattern, line_index))
                continue

            if not stack:
                continue

            folding_range = _close_marker(stack, match.pattern, line_index, line_at)
            if folding_range is not None:
                ranges.append(folding_range)

    return ranges


def clamp_ranges(ranges: Iterable[FoldingRange], line_count: int) -> list[FoldingRange]:
    """Clamp ranges to the bounds of a document.

    Offsets can push ranges past the first or last line, or invert them. This
    keeps each range within ``[0, line_count - 1]`` and drops ranges whose
    start ends up after their end.

    Args:
        ranges: Ranges produced by `scan_document`.
        line_count: Number of lines in the scanned document.

    Returns:
        list[FoldingRange]: Valid ranges in their original order.

    Examples:
        clamp_ranges([FoldingRange(-1, 9)], 5)  # [FoldingRange(0, 4)]
    """
    last_line = line_count - 1
    clamped: list[FoldingRange] = []
    for folding_range in ranges:
        start = max(folding_range.start_line, 0)
        end = min(folding_range.end_line, last_line)
        if start > end:
            continue
        clamped.append(FoldingRange(start, end))
    return clamped
