"""
Value transforms for use with `Parser.as_`.

Each helper maps the value collected by a parser (usually the list produced by
`sequence` or `many`) into something more useful. None of them is ever called with
`NO_VALUE`; the parser wrapper skips the transform in that case.

Functions:
    joined_value(values): Join characters into a string.
    first_value(values): The first collected value.
    constant_value(value): Transform that always returns `value`.
    ignored_value(value): Transform that drops the value.
    flattened_value(values): Flatten one level of nesting.
    int_value(values): Join digits and convert to int.
    chain(*transforms): Compose transforms left to right.

Example:
    >>> sequence(digit(), optional(digit())).as_(int_value)
"""

from collections.abc import Callable
from functools import reduce
from typing import Any

from prsly.prsly_stream import NO_VALUE


def joined_value(values: Any) -> str:
    """Joins a sequence of characters (or already joined strings) into one string."""
    if isinstance(values, str):
        return values
    return "".join(str(value) for value in values)


def first_value(values: Any) -> Any:
    return values[0]


def constant_value(value: Any) -> Callable[[Any], Any]:
    """Returns a transform ignoring its input and producing `value`."""

    def constant(_: Any) -> Any:
        return value

    return constant


def ignored_value(_: Any) -> Any:
    # Marks the match as contributing nothing, so sequences leave it out.
    return NO_VALUE


def flattened_value(values: Any) -> list[Any]:
    """Flattens one level of nesting: `[1, [2, 3], [4]]` becomes `[1, 2, 3, 4]`."""
    flat: list[Any] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            flat.extend(value)
        else:
            flat.append(value)
    return flat


def int_value(values: Any) -> int:
    return int(joined_value(values))


def chain(*transforms: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Composes `transforms` into one, applied left to right.

    Example:
        >>> chain(flattened_value, joined_value)([["1", "2"], "3"])
        '123'
    """

    def chained(value: Any) -> Any:
        return reduce(lambda acc, transform: transform(acc), transforms, value)

    return chained
