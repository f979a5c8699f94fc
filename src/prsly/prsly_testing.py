"""
Assertion helpers for testing grammars.

Reads the way grammar tests are usually phrased:

    >>> assert_that("January").is_a_valid(month).with_value(equal_to(1))
    >>> assert_that("Octember").is_not_a_valid(month)

Failed assertions raise `AssertionError`, so the helpers work as-is inside pytest
test functions.

Classes:
    ParseAssertion: Assertions about one input.
    ValueAssertion: Assertions about the value a successful parse produced.

Functions:
    assert_that(source): Start an assertion about `source`.
    equal_to(expected): Value check comparing with `expected`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from prsly.prsly_combinators import ParseFn, Parser
from prsly.prsly_stream import NO_MATCH, to_stream


class ValueAssertion:
    """Wraps the value produced by a successful parse.

    Attributes:
        value (Any): The parsed value.
    """

    def __init__(self, value: Any) -> None:
        self.value = value

    def with_value(self, check: Callable[[Any], Any]) -> ValueAssertion:
        """Runs `check` on the parsed value.

        `check` may assert on its own; returning `False` also fails the assertion.
        Any other return value is ignored.
        """
        if check(self.value) is False:
            raise AssertionError(f"Unexpected value: {self.value!r}")
        return self


class ParseAssertion:
    """Assertions about how parsers handle one particular input.

    The input is turned into a stream once, so the same source can be checked
    against several parsers, even when it is a one-shot iterator.

    Attributes:
        stream (Stream): The input, positioned at its start.
    """

    def __init__(self, source: Any) -> None:
        self.stream = to_stream(source)

    def _describe(self) -> str:
        return repr("".join(map(str, self.stream.remaining())))

    def is_a_valid(self, parser: Parser | ParseFn) -> ValueAssertion:
        """Asserts that `parser` matches the whole input."""
        rest, value = parser(self.stream)
        if rest is NO_MATCH:
            raise AssertionError(f"{parser!r} does not match {self._describe()}")
        if not rest.at_end():
            raise AssertionError(
                f"{parser!r} leaves {rest.remaining()!r} of {self._describe()} unconsumed"
            )
        return ValueAssertion(value)

    def is_a_partially_valid(self, parser: Parser | ParseFn) -> ValueAssertion:
        """Asserts that `parser` matches a proper prefix of the input."""
        rest, value = parser(self.stream)
        if rest is NO_MATCH:
            raise AssertionError(f"{parser!r} does not match {self._describe()}")
        if rest.at_end():
            raise AssertionError(f"{parser!r} matches all of {self._describe()}")
        return ValueAssertion(value)

    def is_not_a_valid(self, parser: Parser | ParseFn) -> None:
        """Asserts that `parser` does not match the whole input."""
        rest, value = parser(self.stream)
        if rest is not NO_MATCH and rest.at_end():
            raise AssertionError(
                f"{parser!r} unexpectedly matches {self._describe()} as {value!r}"
            )


def assert_that(source: Any) -> ParseAssertion:
    return ParseAssertion(source)


def equal_to(expected: Any) -> Callable[[Any], None]:
    """Returns a value check asserting equality with `expected`."""

    def check(value: Any) -> None:
        if value != expected:
            raise AssertionError(f"expected {expected!r}, got {value!r}")

    return check
