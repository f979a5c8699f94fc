"""
Character-level building blocks for grammars over text.

Functions:
    char(c): Match one specific character.
    char_range(lo, hi): Match one character in an inclusive range.
    one_of(chars): Match one character out of a set.
    string(text): Match `text` exactly; the value is the text.
    ignored(parser): A copy of `parser` whose value is dropped.
    digit(): "0" to "9".
    alpha(): ASCII letters.
    whitespace(): One or more spaces or tabs, with no value.
    anything(): Any single token.

Every call builds a new parser, so re-mapping one with `Parser.as_` never
changes a grammar built from another.
"""

from __future__ import annotations

from prsly.prsly_combinators import (
    Parser,
    ParseFn,
    as_,
    choice,
    literal,
    many,
    match,
    sequence,
)
from prsly.prsly_values import ignored_value, joined_value


def char(c: str) -> Parser:
    return literal(c)


def char_range(lo: str, hi: str) -> Parser:
    """Matches a single character between `lo` and `hi`, both included.

    Raises:
        ValueError: If the range is empty.
    """
    if lo > hi:
        raise ValueError(f"Empty character range {lo!r}-{hi!r}")
    return match(
        lambda value: isinstance(value, str) and lo <= value <= hi,
        name=f"char_range({lo!r}, {hi!r})",
    )


def one_of(chars: str) -> Parser:
    """Matches a single character contained in `chars`.

    Raises:
        ValueError: If `chars` is empty.
    """
    if not chars:
        raise ValueError("one_of() needs at least one character")
    allowed = frozenset(chars)
    return match(
        lambda value: isinstance(value, str) and value in allowed,
        name=f"one_of({chars!r})",
    )


def string(text: str) -> Parser:
    """Matches the characters of `text` in order; the value is `text` itself."""
    parser = sequence(*(literal(c) for c in text)).as_(joined_value)
    parser.name = f"string({text!r})"
    return parser


def ignored(parser: Parser | ParseFn) -> Parser:
    return as_(parser, ignored_value)


def digit() -> Parser:
    parser = char_range("0", "9")
    parser.name = "digit"
    return parser


def alpha() -> Parser:
    parser = choice(char_range("a", "z"), char_range("A", "Z"))
    parser.name = "alpha"
    return parser


def whitespace() -> Parser:
    parser = sequence(one_of(" \t"), many(one_of(" \t"))).as_(ignored_value)
    parser.name = "whitespace"
    return parser


def anything() -> Parser:
    """Matches any single token, like `any_token` but a new parser on every call."""
    return match(lambda value: True, name="anything")
