"""
explicit-folding: configurable, regex-driven folding ranges for text documents.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    explicit-folding main.c --begin "#pragma region" --end "#pragma endregion"

Library Usage:
    from explicit_folding import compile_patterns, scan_document

    patterns = compile_patterns([{"begin": "{", "end": "}"}])
    ranges = scan_document(["int f() {", "  return 0;", "}"], patterns)
    [r.as_tuple() for r in ranges]  # [(0, 1)]
"""

from .compiler import compile_pattern, compile_patterns, escape_literal
from .exceptions import DocumentError, FoldingError, LineTooLongError
from .filesystem import DocumentFileError, load_document
from .models import (
    CompiledPattern,
    Document,
    FoldingRange,
    LineMatch,
    MatchKind,
    OpenMarker,
    TextDocument,
)
from .provider import FoldingProvider
from .scanner import CombinedMatcher, clamp_ranges, iter_line_matches, scan_document

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "compile_pattern",
    "compile_patterns",
    "scan_document",
    "iter_line_matches",
    "clamp_ranges",
    "FoldingProvider",
    "load_document",
    # Data models
    "CombinedMatcher",
    "CompiledPattern",
    "Document",
    "FoldingRange",
    "LineMatch",
    "MatchKind",
    "OpenMarker",
    "TextDocument",
    # Utilities
    "escape_literal",
    # Exceptions
    "DocumentError",
    "DocumentFileError",
    "FoldingError",
    "LineTooLongError",
    # Version
    "__version__",
]
