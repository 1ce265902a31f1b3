from __future__ import annotations

import os

import pytest
from explicit_folding.compiler import compile_patterns
from explicit_folding.scanner import scan_document

atheris = pytest.importorskip("atheris")


def test_compile_patterns_with_fuzzed_sources():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    specs = []

    while provider.remaining_bytes() > 0 and len(specs) < 32:
        if provider.ConsumeBool():
            specs.append(
                {
                    "beginRegex": provider.ConsumeUnicodeNoSurrogates(8),
                    "endRegex": provider.ConsumeUnicodeNoSurrogates(8),
                }
            )
        else:
            specs.append(
                {
                    "begin": provider.ConsumeUnicodeNoSurrogates(4),
                    "end": provider.ConsumeUnicodeNoSurrogates(4),
                    "skipLineRegex": provider.ConsumeUnicodeNoSurrogates(4),
                }
            )

    patterns = compile_patterns(specs)
    assert [p.index for p in patterns] == list(range(len(patterns)))


def test_scan_document_with_fuzzed_lines():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    patterns = compile_patterns([{"begin": "{", "end": "}"}, {"begin": "<!--", "end": "-->"}])
    lines: list[str] = []

    while provider.remaining_bytes() > 0 and len(lines) < 64:
        lines.append(provider.ConsumeUnicodeNoSurrogates(32))

    for folding_range in scan_document(lines, patterns):
        assert 0 <= folding_range.start_line <= folding_range.end_line < len(lines)
