"""Compilation of folding rules into matchers."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from .models import CompiledPattern

logger = logging.getLogger(__name__)

PatternSpec = Mapping[str, object]


def escape_literal(text: str) -> str:
    """Escape `text` so every regex metacharacter matches literally.

    Examples:
        escape_literal("a.b")  # "a\\\\.b"
        escape_literal("{")  # "\\\\{"
    """
    return re.escape(text)


def _try_compile(source: str) -> re.Pattern[str] | None:
    try:
        return re.compile(source)
    except (re.error, OverflowError, RecursionError) as error:
        logger.warning("Invalid folding pattern %r: %s", source, error)
        return None


def _non_empty_string(value: object) -> bool:
    return isinstance(value, str) and value != ""


def _select_pair(spec: PatternSpec) -> tuple[str, str] | None:
    """Pick the begin/end sources honoured for `spec`.

    A raw-regex pair takes precedence over a literal pair; literal sources are
    escaped.

    Returns:
        tuple[str, str] | None: Begin and end regex sources, or None when the
            spec supplies neither complete pair.
    """
    begin_regex, end_regex = spec.get("beginRegex"), spec.get("endRegex")
    if _non_empty_string(begin_regex) and _non_empty_string(end_regex):
        return begin_regex, end_regex

    begin, end = spec.get("begin"), spec.get("end")
    if _non_empty_string(begin) and _non_empty_string(end):
        return escape_literal(begin), escape_literal(end)

    return None


def _select_skip(spec: PatternSpec, literal_key: str, regex_key: str) -> str | None:
    literal = spec.get(literal_key)
    if _non_empty_string(literal):
        return escape_literal(literal)

    regex = spec.get(regex_key)
    if _non_empty_string(regex):
        return regex

    return None


def _read_offset(spec: PatternSpec, key: str) -> int | None:
    value = spec.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def compile_pattern(spec: object, index: int) -> CompiledPattern | None:
    """Compile a single folding rule.

    This step is fallible by contract: any problem with the rule yields None
    so the caller can drop it and carry on with the remaining rules.

    Args:
        spec: Rule mapping using the ``begin``/``end`` or
            ``beginRegex``/``endRegex`` keys plus optional skip markers and
            offsets.
        index: Identity assigned to the compiled rule.

    Returns:
        CompiledPattern | None: Compiled rule, or None when the rule is
            incomplete, has non-integer offsets, or contains a pattern that is
            not a valid regular expression.

    Examples:
        compile_pattern({"begin": "{", "end": "}"}, 0)
        compile_pattern({"beginRegex": "^\\\\s*#if", "endRegex": "^\\\\s*#endif"}, 1)
    """
    if not isinstance(spec, Mapping):
        logger.warning("Ignoring folding rule %r: expected a mapping", spec)
        return None

    pair = _select_pair(spec)
    if pair is None:
        logger.warning("Ignoring folding rule %r: missing begin/end pair", dict(spec))
        return None

    offset_top = _read_offset(spec, "offsetTop")
    offset_bottom = _read_offset(spec, "offsetBottom")
    if offset_top is None or offset_bottom is None:
        logger.warning("Ignoring folding rule %r: offsets must be integers", dict(spec))
        return None

    begin = _try_compile(pair[0])
    end = _try_compile(pair[1])
    if begin is None or end is None:
        return None

    skips: dict[str, re.Pattern[str] | None] = {}
    for name, literal_key, regex_key in (
        ("skip_line", "skipLine", "skipLineRegex"),
        ("skip_begin", "skipBegin", "skipBeginRegex"),
        ("skip_end", "skipEnd", "skipEndRegex"),
    ):
        source = _select_skip(spec, literal_key, regex_key)
        if source is None:
            skips[name] = None
            continue
        compiled = _try_compile(source)
        if compiled is None:
            return None
        skips[name] = compiled

    return CompiledPattern(
        index=index,
        begin=begin,
        end=end,
        offset_top=offset_top,
        offset_bottom=offset_bottom,
        **skips,
    )


def compile_patterns(specs: PatternSpec | Iterable[PatternSpec] | None) -> list[CompiledPattern]:
    """Compile a folding configuration into matchers.

    Accepts either a single rule mapping or an ordered collection of them.
    Rules that fail to compile are dropped; the rest keep their relative order
    and are numbered consecutively so that the index doubles as the rule's
    identity during scanning.

    Args:
        specs: One rule mapping, an iterable of rule mappings, or None. Any
            other value is ignored with a warning.

    Returns:
        list[CompiledPattern]: Compiled rules in input order.

    Examples:
        compile_patterns({"begin": "#region", "end": "#endregion"})
        compile_patterns([{"begin": "{", "end": "}"}, {"beginRegex": "(", "endRegex": ")"}])
    """
    if specs is None:
        return []
    if isinstance(specs, Mapping):
        specs = [specs]
    elif not isinstance(specs, Iterable):
        logger.warning("Ignoring folding configuration %r: expected rules", specs)
        return []

    compiled: list[CompiledPattern] = []
    for spec in specs:
        pattern = compile_pattern(spec, len(compiled))
        if pattern is not None:
            compiled.append(pattern)
    return compiled
