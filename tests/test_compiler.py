from __future__ import annotations

import logging

import pytest

from explicit_folding.compiler import compile_pattern, compile_patterns, escape_literal


def test_single_mapping_is_normalized_to_list():
    patterns = compile_patterns({"begin": "{", "end": "}"})

    assert len(patterns) == 1
    assert patterns[0].index == 0


def test_none_configuration_compiles_to_nothing():
    assert compile_patterns(None) == []
    assert compile_patterns([]) == []


def test_literal_pair_is_escaped():
    (pattern,) = compile_patterns({"begin": "(*", "end": "*)"})

    assert pattern.begin.search("call (* comment")
    assert not pattern.begin.search("call ( comment")
    assert pattern.end.search("end *)")


def test_regex_pair_is_used_verbatim():
    (pattern,) = compile_patterns({"beginRegex": r"^\s*#if\b", "endRegex": r"^\s*#endif\b"})

    assert pattern.begin.search("  #if DEBUG")
    assert not pattern.begin.search("x = 1  # if")
    assert pattern.end.search("#endif")


def test_regex_pair_takes_precedence_over_literal_pair():
    (pattern,) = compile_patterns(
        {"begin": "[", "end": "]", "beginRegex": "BEGIN", "endRegex": "END"}
    )

    assert pattern.begin.pattern == "BEGIN"
    assert pattern.end.pattern == "END"


def test_incomplete_regex_pair_falls_back_to_literals():
    (pattern,) = compile_patterns({"begin": "<", "end": ">", "beginRegex": "x"})

    assert pattern.begin.search("<")
    assert not pattern.begin.search("x")


@pytest.mark.parametrize(
    "spec",
    [
        {},
        {"begin": "{"},
        {"end": "}"},
        {"begin": "", "end": "}"},
        {"begin": 1, "end": 2},
        {"beginRegex": "("},
        "not a mapping",
        None,
    ],
)
def test_incomplete_specs_are_dropped(spec):
    assert compile_pattern(spec, 0) is None


def test_invalid_regex_drops_only_that_spec(caplog):
    specs = [
        {"begin": "{", "end": "}"},
        {"beginRegex": "(unclosed", "endRegex": "\\)"},
        {"begin": "#region", "end": "#endregion"},
    ]

    with caplog.at_level(logging.WARNING, logger="explicit_folding.compiler"):
        patterns = compile_patterns(specs)

    assert [p.begin.pattern for p in patterns] == [escape_literal("{"), escape_literal("#region")]
    assert [p.index for p in patterns] == [0, 1]
    assert "Invalid folding pattern" in caplog.text


def test_invalid_skip_regex_drops_spec():
    patterns = compile_patterns({"begin": "{", "end": "}", "skipLineRegex": "[unclosed"})

    assert patterns == []


def test_skip_literal_preferred_over_regex():
    (pattern,) = compile_patterns(
        {"begin": "{", "end": "}", "skipLine": "//.", "skipLineRegex": "#"}
    )

    assert pattern.skip_line.search("a //. b")
    assert not pattern.skip_line.search("a //x b")
    assert not pattern.skip_line.search("# comment")


def test_skip_regex_used_unescaped():
    (pattern,) = compile_patterns(
        {
            "begin": "{",
            "end": "}",
            "skipBeginRegex": r"^\s*//",
            "skipEndRegex": r"NOFOLD$",
        }
    )

    assert pattern.skip_line is None
    assert pattern.skip_begin.search("   // {")
    assert pattern.skip_end.search("} NOFOLD")


def test_offsets_default_to_zero():
    (pattern,) = compile_patterns({"begin": "{", "end": "}"})

    assert pattern.offset_top == 0
    assert pattern.offset_bottom == 0


def test_offsets_are_carried_over():
    (pattern,) = compile_patterns({"begin": "{", "end": "}", "offsetTop": 1, "offsetBottom": -2})

    assert pattern.offset_top == 1
    assert pattern.offset_bottom == -2


@pytest.mark.parametrize("offset", ["1", 1.5, True])
def test_non_integer_offsets_drop_spec(offset):
    assert compile_patterns({"begin": "{", "end": "}", "offsetTop": offset}) == []


def test_output_order_matches_input_order():
    patterns = compile_patterns(
        [
            {"begin": "a", "end": "b"},
            {"begin": "c", "end": "d"},
            {"begin": "e", "end": "f"},
        ]
    )

    assert [p.begin.pattern for p in patterns] == ["a", "c", "e"]
    assert [p.index for p in patterns] == [0, 1, 2]


def test_generator_input_is_accepted():
    specs = ({"begin": str(n), "end": str(n + 1)} for n in range(3))

    assert len(compile_patterns(specs)) == 3


@pytest.mark.parametrize("source", ["a{4294967296}", "(?:a{4294967296})?"])
def test_regex_compiler_failures_drop_only_that_spec(source):
    patterns = compile_patterns(
        [{"beginRegex": source, "endRegex": "b"}, {"begin": "{", "end": "}"}]
    )

    assert len(patterns) == 1
    assert patterns[0].index == 0
    assert patterns[0].begin.pattern == escape_literal("{")


@pytest.mark.parametrize("value", [42, 1.5, True])
def test_non_iterable_configuration_compiles_to_nothing(value, caplog):
    with caplog.at_level(logging.WARNING, logger="explicit_folding.compiler"):
        assert compile_patterns(value) == []

    assert "Ignoring folding configuration" in caplog.text
