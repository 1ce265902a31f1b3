"""Host-facing folding range provider."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .compiler import PatternSpec, compile_patterns
from .config import FoldingSettings
from .models import CompiledPattern, DocumentLike, FoldingRange
from .scanner import clamp_ranges, line_accessor, scan_document

logger = logging.getLogger(__name__)


class FoldingProvider:
    """Compiles a folding configuration once and serves ranges for documents.

    The compiled rules are never mutated, so one provider can be shared by
    any number of concurrent scans.

    Args:
        configuration: A single rule mapping or an ordered collection of rules.
        clamp: Whether ranges are clamped to the document bounds.

    Examples:
        provider = FoldingProvider([{"begin": "#region", "end": "#endregion"}])
        provider.provide_folding_ranges(["#region", "x", "#endregion"])
    """

    def __init__(
        self,
        configuration: PatternSpec | Iterable[PatternSpec] | None = None,
        clamp: bool = True,
    ):
        self.patterns: tuple[CompiledPattern, ...] = tuple(compile_patterns(configuration))
        self.clamp = clamp
        logger.debug("Compiled %d folding rule(s)", len(self.patterns))

    @classmethod
    def from_settings(cls, settings: FoldingSettings) -> FoldingProvider:
        return cls(settings.rules, clamp=settings.clamp)

    def provide_folding_ranges(self, document: DocumentLike | str) -> list[FoldingRange]:
        """Compute the folding ranges of `document`.

        Returns:
            list[FoldingRange]: Ranges in closing order, clamped to the
                document when the provider was built with ``clamp=True``.
        """
        ranges = scan_document(document, self.patterns)
        if not self.clamp:
            return ranges
        line_count, _ = line_accessor(document)
        return clamp_ranges(ranges, line_count)
