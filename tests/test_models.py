from explicit_folding.models import Document, FoldingRange, MatchKind, TextDocument


def test_match_kind_members():
    assert list(MatchKind) == [MatchKind.BEGIN, MatchKind.END, MatchKind.SKIP_LINE]


def test_folding_range_orders_by_start_then_end():
    ranges = [FoldingRange(3, 4), FoldingRange(0, 5), FoldingRange(0, 2)]

    assert sorted(ranges) == [FoldingRange(0, 2), FoldingRange(0, 5), FoldingRange(3, 4)]
    assert FoldingRange(1, 2).as_tuple() == (1, 2)


def test_text_document_splits_lines_without_terminators():
    document = TextDocument.from_text("a\r\nb\n\nc", path="x.txt")

    assert document.lines == ["a", "b", "", "c"]
    assert document.line_count == 4
    assert document.line_at(1) == "b"
    assert document.path == "x.txt"


def test_text_document_satisfies_document_protocol():
    assert isinstance(TextDocument(), Document)
    assert not isinstance(["a", "b"], Document)
