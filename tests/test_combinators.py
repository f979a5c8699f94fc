from typing import Any

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from prsly.prsly_combinators import (
    FAILURE,
    ParseError,
    Parser,
    any_token,
    as_,
    at_end,
    choice,
    enclosed,
    full_match,
    literal,
    many,
    match,
    none,
    not_,
    optional,
    parse,
    parse_all,
    sequence,
    skip_to,
    to_be_defined,
)
from prsly.prsly_stream import NO_MATCH, NO_VALUE, Stream
from prsly.prsly_text import ignored, string
from prsly.prsly_values import constant_value, ignored_value, joined_value


def balanced_parens() -> Parser:
    group = to_be_defined()
    group.define(sequence(literal("("), many(group), literal(")")))
    return group


# --------------------------------------------------------------------------
# Primitives
# --------------------------------------------------------------------------


def test_match_returns_token_and_rest() -> None:
    stream = Stream.from_string("7x")
    rest, value = match(str.isdigit)(stream)
    assert value == "7"
    assert rest is stream.tail()


def test_match_failure_is_sentinel_pair() -> None:
    assert match(str.isdigit)(Stream.from_string("x")) == FAILURE
    assert FAILURE == (NO_MATCH, NO_VALUE)


def test_match_never_sees_end_of_stream() -> None:
    seen: list[Any] = []
    parser = match(lambda token: seen.append(token) or True)
    assert parser(Stream.from_string("")) == FAILURE
    assert seen == []


@given(st.integers(), st.integers())  # type: ignore[misc]
def test_literal_matches_only_its_token(t: int, u: int) -> None:
    assume(t != u)
    assert full_match(literal(t), [t])
    assert not full_match(literal(t), [u])


def test_any_token_consumes_one() -> None:
    rest, value = any_token(Stream.from_list([None, 1]))
    assert value is None
    assert rest.head() == 1


def test_any_token_fails_at_end() -> None:
    assert any_token(Stream.from_string("")) == FAILURE


def test_none_always_fails() -> None:
    assert none(Stream.from_string("a")) == FAILURE
    assert none(Stream.from_string("")) == FAILURE


def test_at_end() -> None:
    stream = Stream.from_string("")
    assert at_end(stream) == (stream, NO_VALUE)
    assert at_end(Stream.from_string("a")) == FAILURE


# --------------------------------------------------------------------------
# Value mapping
# --------------------------------------------------------------------------


@given(st.text(min_size=1))  # type: ignore[misc]
def test_as_applies_transform_to_value(text: str) -> None:
    plain = many(any_token)
    _, value = parse(plain, text)
    _, mapped = parse(as_(plain, joined_value), text)
    assert mapped == joined_value(value) == text


def test_as_skips_transform_for_no_value() -> None:
    calls: list[Any] = []
    parser = as_(as_(literal("a"), ignored_value), calls.append)
    rest, value = parse(parser, "a")
    assert value is NO_VALUE
    assert rest.at_end()
    assert calls == []


def test_as_passes_failure_through() -> None:
    parser = as_(literal("a"), constant_value(1))
    assert parse(parser, "b") == FAILURE


def test_module_as_leaves_original_untouched() -> None:
    original = literal("a")
    as_(original, constant_value(1))
    assert original.transform is None
    assert parse(original, "a")[1] == "a"


def test_fluent_as_rebinds_in_place() -> None:
    letter = literal("a")
    word = sequence(letter, letter)
    assert letter.as_(str.upper) is letter
    assert parse(word, "aa")[1] == ["A", "A"]


def test_fluent_as_replaces_previous_transform() -> None:
    parser = literal("a").as_(constant_value(1)).as_(constant_value(2))
    assert parse(parser, "a")[1] == 2


# --------------------------------------------------------------------------
# Sequencing, repetition, choice, optional
# --------------------------------------------------------------------------


def test_sequence_collects_values_in_order() -> None:
    parser = sequence(literal("a"), literal("b"), literal("c"))
    rest, value = parse(parser, "abcd")
    assert value == ["a", "b", "c"]
    assert rest.head() == "d"


def test_sequence_skips_no_value() -> None:
    comma = ignored(literal(","))
    assert parse_all(sequence(literal("a"), comma, literal("b")), "a,b") == ["a", "b"]


def test_sequence_fails_without_partial_progress() -> None:
    parser = sequence(literal("x"), literal("a"))
    assert parse(parser, "a") == FAILURE
    assert parse(sequence(literal("a"), literal("x")), "ab") == FAILURE


def test_empty_sequence_matches_nothing() -> None:
    stream = Stream.from_string("a")
    assert sequence()(stream) == (stream, [])


@pytest.mark.parametrize(  # type: ignore[misc]
    "text, count", [("b", 0), ("ab", 1), ("aaab", 3)]
)
def test_many_counts_repetitions(text: str, count: int) -> None:
    rest, value = parse(many(literal("a")), text)
    assert value == ["a"] * count
    assert rest.head() == "b"


def test_many_never_fails() -> None:
    stream = Stream.from_string("")
    assert many(literal("a"))(stream) == (stream, [])


def test_many_stops_on_empty_match() -> None:
    rest, value = parse(many(optional(literal("a"))), "aab")
    assert value == ["a", "a"]
    assert rest.head() == "b"


def test_many_iterates_over_long_input() -> None:
    rest, value = parse(many(any_token), "x" * 20000)
    assert len(value) == 20000
    assert rest.at_end()


def test_choice_prefers_first_alternative() -> None:
    parser = choice(
        as_(literal("a"), constant_value("first")),
        as_(literal("a"), constant_value("second")),
    )
    assert parse_all(parser, "a") == "first"


def test_choice_falls_through_to_later_alternatives() -> None:
    parser = choice(
        sequence(literal("a"), literal("b")), sequence(literal("a"), literal("c"))
    )
    assert parse_all(parser, "ac") == ["a", "c"]


def test_choice_fails_when_all_fail() -> None:
    assert parse(choice(literal("a"), literal("b")), "c") == FAILURE
    assert parse(choice(), "c") == FAILURE


def test_choice_commits_to_first_match() -> None:
    parser = sequence(choice(literal("a"), string("ab")), literal("b"))
    assert full_match(parser, "ab")
    assert not full_match(sequence(choice(literal("a"), string("ab")), at_end), "ab")


def test_optional_on_failure_keeps_position() -> None:
    stream = Stream.from_string("b")
    assert optional(literal("a"))(stream) == (stream, NO_VALUE)


def test_optional_passes_success_through() -> None:
    rest, value = parse(optional(literal("a")), "ab")
    assert value == "a"
    assert rest.head() == "b"


@given(st.text())  # type: ignore[misc]
def test_optional_never_fails(text: str) -> None:
    rest, _ = parse(optional(string("needle")), text)
    assert rest is not NO_MATCH


def test_not_is_negative_lookahead() -> None:
    stream = Stream.from_string("b")
    assert not_(literal("a"))(stream) == (stream, NO_VALUE)
    assert parse(not_(literal("a")), "a") == FAILURE


# --------------------------------------------------------------------------
# Forward references
# --------------------------------------------------------------------------


@pytest.mark.parametrize("text", ["()", "(())", "(()())"])  # type: ignore[misc]
def test_recursive_grammar_accepts_balanced(text: str) -> None:
    assert full_match(balanced_parens(), text)


@pytest.mark.parametrize("text", ["(", ")", "(()", "(()))"])  # type: ignore[misc]
def test_recursive_grammar_rejects_unbalanced(text: str) -> None:
    assert not full_match(balanced_parens(), text)


def test_undefined_reference_fails() -> None:
    placeholder = to_be_defined()
    assert not placeholder.defined
    assert parse(placeholder, "a") == FAILURE


def test_reference_used_before_definition() -> None:
    placeholder = to_be_defined()
    word = sequence(placeholder, placeholder)
    assert placeholder.define(literal("a")) is placeholder
    assert placeholder.defined
    assert parse_all(word, "aa") == ["a", "a"]


def test_reference_can_be_redefined() -> None:
    placeholder = to_be_defined()
    placeholder.define(literal("a"))
    placeholder.define(literal("b"))
    assert full_match(placeholder, "b")
    assert not full_match(placeholder, "a")


def test_define_rejects_non_callable() -> None:
    with pytest.raises(TypeError, match="str"):
        to_be_defined().define("not a parser")  # type: ignore[arg-type]


def test_reference_transform_applies_to_recursion() -> None:
    group = to_be_defined()
    group.define(
        sequence(ignored(literal("(")), many(group), ignored(literal(")")))
    ).as_(lambda value: value[0])
    assert parse_all(group, "(()())") == [[], []]


# --------------------------------------------------------------------------
# Skip-to and enclosed
# --------------------------------------------------------------------------


def test_skip_to_stops_before_match() -> None:
    rest, value = parse(skip_to(string("]]")), "abc]]")
    assert value == ["a", "b", "c"]
    assert rest.remaining() == ["]", "]"]


def test_skip_to_immediate_match_has_no_value() -> None:
    stream = Stream.from_string("]]")
    assert skip_to(string("]]"))(stream) == (stream, NO_VALUE)


def test_skip_to_fails_without_match() -> None:
    assert parse(skip_to(string("]]")), "abc]") == FAILURE


def test_skip_to_can_stop_at_end() -> None:
    rest, value = parse(skip_to(at_end), "ab")
    assert value == ["a", "b"]
    assert rest.at_end()


def double_brackets(inner: Parser) -> Parser:
    return enclosed(ignored(string("[[")), inner, ignored(string("]]")))


def test_enclosed_allows_single_closing_brackets_inside() -> None:
    parser = double_brackets(many(any_token).as_(joined_value))
    assert parse_all(parser, "[[^][^]]") == ["^][^"]


def test_enclosed_stops_at_first_closing() -> None:
    parser = double_brackets(many(any_token))
    assert not full_match(parser, "[[++]]+]]")
    rest, value = parse(parser, "[[++]]+]]")
    assert value == [["+", "+"]]
    assert rest.remaining() == ["+", "]", "]"]


def test_enclosed_requires_inner_to_consume_span() -> None:
    assert parse(double_brackets(literal("+")), "[[++]]") == FAILURE
    assert full_match(double_brackets(literal("+")), "[[+]]")


def test_enclosed_empty_span() -> None:
    assert parse_all(double_brackets(many(any_token)), "[[]]") == [[]]


def test_enclosed_fails_without_opening_or_closing() -> None:
    parser = double_brackets(many(any_token))
    assert parse(parser, "[abc]]") == FAILURE
    assert parse(parser, "[[abc]") == FAILURE


def test_enclosed_keeps_delimiter_values() -> None:
    parser = enclosed(literal("<"), many(any_token).as_(joined_value), literal(">"))
    assert parse_all(parser, "<ab>") == ["<", "ab", ">"]


# --------------------------------------------------------------------------
# Running parsers
# --------------------------------------------------------------------------


def test_parse_all_reports_no_match() -> None:
    with pytest.raises(ParseError) as e:
        parse_all(literal("a"), "b")
    assert e.value.reason == "no-match"


def test_parse_all_reports_incomplete() -> None:
    with pytest.raises(ParseError, match="1 token") as e:
        parse_all(literal("a"), "ab")
    assert e.value.reason == "incomplete"
    assert e.value.remaining == ["b"]


def test_full_match_on_list_tokens() -> None:
    parser = sequence(literal(1), literal(2))
    assert full_match(parser, [1, 2])
    assert not full_match(parser, [1, 2, 3])


def test_parser_repr() -> None:
    parser = sequence(literal("a"), many(any_token), optional(none))
    assert repr(parser) == "sequence(literal('a'), many(any_token), optional(none))"
    assert repr(to_be_defined()) == "to_be_defined()"
