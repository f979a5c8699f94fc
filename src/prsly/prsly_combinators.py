"""
Parser combinators over prsly streams.

A parser is a callable taking a `Stream` and returning a pair: the remaining stream
and the parsed value on success, or `(NO_MATCH, NO_VALUE)` on failure. Failure is a
plain return value; nothing in this module raises on a failed match. Combinators
build larger parsers out of smaller ones and never keep state between calls, except
for forward references, which are bound once while the grammar is being built.

Primitives:
    match(predicate): Match one token satisfying `predicate`.
    literal(token): Match one token equal to `token`.
    any_token: Match any single token.
    none: Never match.
    at_end: Match the end of the stream without consuming anything.

Combinators:
    sequence(*parsers): All parsers in order, collecting their values.
    many(parser): Zero or more repetitions, collecting their values.
    choice(*parsers): First parser that matches, in declaration order.
    optional(parser): The parser, or nothing.
    not_(parser): Negative lookahead.
    to_be_defined(): Forward reference for recursive grammars.
    skip_to(parser): Skip tokens up to where `parser` matches.
    enclosed(opening, inner, closing): Find the closing delimiter first, then
        parse what lies between with `inner`.

Running:
    parse(parser, source): Run a parser on a string, list or stream.
    full_match(parser, source): Whether the parser consumes all of `source`.
    parse_all(parser, source): The value of a full match, or `ParseError`.

Example:
    >>> digit = match(str.isdigit)
    >>> number = many(digit).as_(lambda digits: int("".join(digits)))
    >>> parse_all(number, "42")
    42
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Union

from prsly.prsly_stream import NO_MATCH, NO_VALUE, Sentinel, Stream, to_stream

logger = logging.getLogger(__name__)

ParseResult = tuple[Union[Stream, Sentinel], Any]
ParseFn = Callable[[Stream], ParseResult]
Transform = Callable[[Any], Any]

FAILURE: ParseResult = (NO_MATCH, NO_VALUE)


class ParseError(Exception):
    """Raised by `parse_all` when the input is not matched in full.

    Attributes:
        reason (str): Either "no-match" or "incomplete".
        remaining (list[Any]): Tokens left unconsumed ("incomplete" only).

    Example:
        raise ParseError("incomplete", ["x"])
    """

    def __init__(self, reason: str, remaining: list[Any] | None = None):
        self.reason = reason
        self.remaining = remaining or []
        if reason == "incomplete":
            message = (
                f"Input not fully consumed, {len(self.remaining)} token(s) left: "
                f"{self.remaining[:20]!r}"
            )
        else:
            message = "Input does not match"
        super().__init__(message)


class Parser:
    """
    Callable wrapper around a parse function with a rebindable value transform.

    Calling the parser runs its parse function and, on a successful match with an
    actual value, passes the value through the active transform. `as_` replaces the
    active transform in place rather than wrapping, so the transform chain stays
    flat and grammars already built out of this parser see the new transform.

    Attributes:
        parse_fn (Callable[[Stream], ParseResult]): The matching logic.
        name (str): Readable description used in `repr` and log messages.
        transform (Callable[[Any], Any] | None): The active value transform.
    """

    def __init__(self, parse_fn: ParseFn, name: str | None = None) -> None:
        self.parse_fn = parse_fn
        self.name = name or getattr(parse_fn, "__name__", "parser")
        self.transform: Transform | None = None

    def __call__(self, stream: Stream) -> ParseResult:
        rest, value = self.parse_fn(stream)
        if rest is NO_MATCH:
            return FAILURE
        if self.transform is None or value is NO_VALUE:
            return rest, value
        return rest, self.transform(value)

    def as_(self, transform: Transform) -> Parser:
        """Rebinds the value transform of this parser.

        Args:
            transform: Function applied to every value this parser produces. It is
                never called for a failed match or for `NO_VALUE`.

        Returns:
            Parser: This parser, for chaining.
        """
        self.transform = transform
        return self

    def __repr__(self) -> str:
        return self.name


class ForwardParser(Parser):
    """A placeholder parser for rules that refer to themselves.

    Fails until `define` binds it. Every call delegates to whatever parser is bound
    at call time, so grammars built from the placeholder before `define` work once
    it has been bound.
    """

    def __init__(self) -> None:
        super().__init__(self._delegate, name="to_be_defined()")
        self.target: Parser | ParseFn = none

    def _delegate(self, stream: Stream) -> ParseResult:
        return self.target(stream)

    def define(self, parser: Parser | ParseFn) -> ForwardParser:
        """Binds the placeholder to `parser`.

        Args:
            parser: The actual rule. It may refer to this placeholder.

        Returns:
            ForwardParser: This placeholder, so `.as_()` can be chained.

        Raises:
            TypeError: If `parser` is not callable.
        """
        if not callable(parser):
            raise TypeError(f"Cannot define a parser as {type(parser).__name__}")
        if self.target is not none:
            logger.debug("Redefining forward reference %x", id(self))
        self.target = parser
        return self

    @property
    def defined(self) -> bool:
        return self.target is not none


def as_(parser: Parser | ParseFn, transform: Transform) -> Parser:
    """Returns a new parser applying `transform` to the values of `parser`.

    Unlike `Parser.as_`, the original parser is left untouched.
    """
    return Parser(parser, name=f"as_({parser!r})").as_(transform)


# --------------------------------------------------------------------------
# Primitives
# --------------------------------------------------------------------------


def match(predicate: Callable[[Any], bool], name: str | None = None) -> Parser:
    """Matches a single token for which `predicate` holds.

    The end of the stream is never passed to `predicate` and never matches.

    Args:
        predicate: Test applied to the current token.
        name: Optional description for `repr`.

    Returns:
        Parser: Succeeds with the token as its value and the stream after it.
    """

    def parse_match(stream: Stream) -> ParseResult:
        if stream.at_end() or not predicate(stream.head()):
            return FAILURE
        return stream.tail(), stream.head()

    return Parser(
        parse_match,
        name=name or f"match({getattr(predicate, '__name__', repr(predicate))})",
    )


def literal(token: Any) -> Parser:
    """Matches one token equal to `token`."""
    return match(lambda value: value == token, name=f"literal({token!r})")


def _parse_none(stream: Stream) -> ParseResult:
    return FAILURE


def _parse_at_end(stream: Stream) -> ParseResult:
    if stream.at_end():
        return stream, NO_VALUE
    return FAILURE


any_token = match(lambda value: True, name="any_token")
none = Parser(_parse_none, name="none")
at_end = Parser(_parse_at_end, name="at_end")


# --------------------------------------------------------------------------
# Combinators
# --------------------------------------------------------------------------


def _names(parsers: Iterable[Any]) -> str:
    return ", ".join(repr(p) for p in parsers)


def sequence(*parsers: Parser | ParseFn) -> Parser:
    """Applies `parsers` one after the other.

    Fails as soon as one of them fails. On success the value is the list of the
    sub-parser values, leaving out every `NO_VALUE`.
    """

    def parse_sequence(stream: Stream) -> ParseResult:
        values = []
        for parser in parsers:
            stream, value = parser(stream)
            if stream is NO_MATCH:
                return FAILURE
            if value is not NO_VALUE:
                values.append(value)
        return stream, values

    return Parser(parse_sequence, name=f"sequence({_names(parsers)})")


def many(parser: Parser | ParseFn) -> Parser:
    """Applies `parser` as often as it matches.

    Never fails. The value is the (possibly empty) list of matched values, leaving
    out every `NO_VALUE`. Repetition is a loop, not recursion, and stops as soon as
    an iteration matches without consuming anything.
    """

    def parse_many(stream: Stream) -> ParseResult:
        values = []
        while True:
            rest, value = parser(stream)
            if rest is NO_MATCH:
                return stream, values
            if value is not NO_VALUE:
                values.append(value)
            if rest is stream:
                return stream, values
            stream = rest

    return Parser(parse_many, name=f"many({parser!r})")


def choice(*parsers: Parser | ParseFn) -> Parser:
    """Tries `parsers` in order from the same position; the first match wins.

    Later alternatives are not tried once one has matched, even if they would
    match too. Put more specific alternatives first.
    """

    def parse_choice(stream: Stream) -> ParseResult:
        for parser in parsers:
            result = parser(stream)
            if result[0] is not NO_MATCH:
                return result
        return FAILURE

    return Parser(parse_choice, name=f"choice({_names(parsers)})")


def optional(parser: Parser | ParseFn) -> Parser:
    """Matches `parser` or nothing; never fails."""

    def parse_optional(stream: Stream) -> ParseResult:
        result = parser(stream)
        if result[0] is NO_MATCH:
            return stream, NO_VALUE
        return result

    return Parser(parse_optional, name=f"optional({parser!r})")


def not_(parser: Parser | ParseFn) -> Parser:
    """Succeeds without consuming anything iff `parser` does not match here."""

    def parse_not(stream: Stream) -> ParseResult:
        if parser(stream)[0] is NO_MATCH:
            return stream, NO_VALUE
        return FAILURE

    return Parser(parse_not, name=f"not_({parser!r})")


def to_be_defined() -> ForwardParser:
    """Creates a forward reference; bind it later with `.define(parser)`.

    Example:
        >>> group = to_be_defined()
        >>> group.define(sequence(literal("("), many(group), literal(")")))
        to_be_defined()
    """
    return ForwardParser()


def skip_to(parser: Parser | ParseFn) -> Parser:
    """Skips tokens up to the first position where `parser` matches.

    The tokens matched by `parser` itself are not consumed. The value is the list
    of skipped tokens, or `NO_VALUE` when `parser` matches right away. Fails if the
    end of the stream is reached without `parser` ever matching.
    """

    def parse_skip_to(stream: Stream) -> ParseResult:
        skipped = []
        while True:
            if parser(stream)[0] is not NO_MATCH:
                return stream, skipped if skipped else NO_VALUE
            if stream.at_end():
                return FAILURE
            skipped.append(stream.head())
            stream = stream.tail()

    return Parser(parse_skip_to, name=f"skip_to({parser!r})")


def enclosed(
    opening: Parser | ParseFn,
    inner: Parser | ParseFn,
    closing: Parser | ParseFn,
) -> Parser:
    """Matches `opening`, then `inner`, then `closing`, locating `closing` first.

    After `opening`, the span up to the first position where `closing` matches is
    collected without interpreting it. That span is then parsed on its own with
    `inner`, which has to consume it entirely, before `closing` is matched. The
    interior grammar therefore never needs to know about the terminator.

    The value is the list of non-absent values of `opening`, `inner` and `closing`.
    """
    locate_closing = skip_to(closing)

    def parse_enclosed(stream: Stream) -> ParseResult:
        stream, opening_value = opening(stream)
        if stream is NO_MATCH:
            return FAILURE

        stream, span = locate_closing(stream)
        if stream is NO_MATCH:
            return FAILURE

        interior = Stream.from_list([] if span is NO_VALUE else span)
        rest, inner_value = inner(interior)
        if rest is NO_MATCH or not rest.at_end():
            logger.debug("Enclosed span rejected by %r: %r", inner, span)
            return FAILURE

        stream, closing_value = closing(stream)
        if stream is NO_MATCH:
            return FAILURE

        values = [
            value
            for value in (opening_value, inner_value, closing_value)
            if value is not NO_VALUE
        ]
        return stream, values

    return Parser(
        parse_enclosed, name=f"enclosed({_names((opening, inner, closing))})"
    )


# --------------------------------------------------------------------------
# Running parsers
# --------------------------------------------------------------------------


def parse(parser: Parser | ParseFn, source: Any) -> ParseResult:
    """Runs `parser` on a stream, string or list and returns the raw result."""
    return parser(to_stream(source))


def full_match(parser: Parser | ParseFn, source: Any) -> bool:
    """Whether `parser` matches the whole of `source`."""
    rest, _ = parse(parser, source)
    return rest is not NO_MATCH and rest.at_end()


def parse_all(parser: Parser | ParseFn, source: Any) -> Any:
    """Runs `parser` on `source` and requires it to consume everything.

    Returns:
        Any: The parsed value (which may be `NO_VALUE`).

    Raises:
        ParseError: With reason "no-match" if the parser fails, or "incomplete" if
            input is left over.
    """
    rest, value = parse(parser, source)
    if rest is NO_MATCH:
        raise ParseError("no-match")
    if not rest.at_end():
        raise ParseError("incomplete", rest.remaining())
    return value
