"""
Sample grammars built from the prsly combinators.

These double as executable documentation and as the grammars the `prsly` command
line can run. Each grammar is built by a factory so callers get a fresh parser they
are free to re-map with `as_`.

Grammars:
    datetime: "August 17, 2014 12:12:12", seconds optional.
    parens: One balanced group of parentheses, e.g. "(()())".
    brackets: A "[[...]]" span in which single "]" are allowed.
    message: Message templates with "{name}" and "{@reference, a=b}" placeholders.

Functions:
    get_grammar(name): Build a registered grammar by name.

Attributes:
    GRAMMARS (dict[str, Callable[[], Parser]]): Registered grammar factories.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from prsly.prsly_combinators import (
    Parser,
    as_,
    choice,
    enclosed,
    many,
    not_,
    optional,
    sequence,
    to_be_defined,
)
from prsly.prsly_text import (
    alpha,
    anything,
    char,
    digit,
    ignored,
    string,
    whitespace,
)
from prsly.prsly_values import constant_value, first_value, int_value, joined_value

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def datetime_grammar() -> Parser:
    """Dates like "January 1, 2014", optionally followed by "12:12" or "12:12:12".

    The value is `{"date": {"year", "month", "day"}, "time": {...} or None}`.
    """
    month = choice(
        *(
            string(name).as_(constant_value(number))
            for number, name in enumerate(MONTHS, start=1)
        )
    )
    numeral = digit()
    spacing = whitespace()
    day = sequence(numeral, optional(numeral)).as_(int_value)
    year = sequence(numeral, numeral, numeral, numeral).as_(int_value)
    comma = ignored(char(","))
    date = sequence(month, spacing, day, comma, spacing, year).as_(
        lambda value: {"year": value[2], "month": value[0], "day": value[1]}
    )

    two_digits = sequence(numeral, numeral).as_(int_value)
    colon = ignored(char(":"))
    time = sequence(
        two_digits,
        colon,
        two_digits,
        optional(sequence(colon, two_digits).as_(first_value)),
    ).as_(
        lambda value: {
            "hours": value[0],
            "minutes": value[1],
            "seconds": value[2] if len(value) > 2 else None,
        }
    )

    return sequence(date, optional(sequence(spacing, time).as_(first_value))).as_(
        lambda value: {"date": value[0], "time": value[1] if len(value) > 1 else None}
    )


def parens_grammar() -> Parser:
    """A single balanced group of parentheses.

    The value mirrors the nesting: "()" gives `[]`, "(()())" gives `[[], []]`.
    """
    group = to_be_defined()
    group.define(sequence(ignored(char("(")), many(group), ignored(char(")")))).as_(
        first_value
    )
    return group


def brackets_grammar() -> Parser:
    """Everything between "[[" and the first "]]"; the value is the inner text."""
    return enclosed(
        ignored(string("[[")),
        many(anything()).as_(joined_value),
        ignored(string("]]")),
    ).as_(first_value)


@dataclass(frozen=True)
class Lookup:
    """A "{name}" placeholder: substitute `name` from the context."""

    name: str


@dataclass(frozen=True)
class Override:
    """A "target=source" binding attached to a reference."""

    target: str
    source: str


@dataclass(frozen=True)
class Reference:
    """A "{@name, a=b}" placeholder: embed another message, with overrides."""

    name: str
    overrides: tuple[Override, ...] = field(default_factory=tuple)


def message_grammar() -> Parser:
    """Message templates as used by the formatting layer.

    Raw text may escape any character with a backslash. Placeholders are either a
    lookup ("{count}") or a reference to another message, optionally overriding
    context entries ("{@pebbles, count=pebble_count}"). The value is the list of
    text chunks and `Lookup` / `Reference` nodes, in order.
    """
    lbrace = ignored(char("{"))
    rbrace = ignored(char("}"))
    spacing = optional(whitespace())
    underscore = char("_")
    letter = alpha()
    token = anything()

    name = sequence(
        choice(letter, underscore),
        many(choice(letter, digit(), underscore)).as_(joined_value),
    ).as_(joined_value)

    raw_character = choice(
        sequence(ignored(char("\\")), token),
        sequence(not_(lbrace), token),
    ).as_(first_value)
    raw_text = sequence(raw_character, many(raw_character).as_(joined_value)).as_(
        joined_value
    )

    override = sequence(name, spacing, ignored(char("=")), spacing, name).as_(
        lambda value: Override(value[0], value[1])
    )
    reference = sequence(
        ignored(char("@")),
        name,
        many(sequence(spacing, ignored(char(",")), spacing, override).as_(first_value)),
    ).as_(lambda value: Reference(value[0], tuple(value[1])))
    lookup = as_(name, Lookup)

    placeholder = sequence(
        lbrace, spacing, choice(reference, lookup), spacing, rbrace
    ).as_(first_value)

    return many(choice(raw_text, placeholder))


GRAMMARS: dict[str, Callable[[], Parser]] = {
    "datetime": datetime_grammar,
    "parens": parens_grammar,
    "brackets": brackets_grammar,
    "message": message_grammar,
}


def get_grammar(name: str) -> Parser:
    """Builds the grammar registered as `name`.

    Raises:
        KeyError: If no grammar has that name.
    """
    try:
        factory = GRAMMARS[name]
    except KeyError:
        raise KeyError(
            f"Unknown grammar {name!r}, expected one of {sorted(GRAMMARS)}"
        ) from None
    return factory()


def describe(value: Any) -> Any:
    """Turns parse values into plain data (dicts, lists, strings) for output."""
    if isinstance(value, Lookup):
        return {"lookup": value.name}
    if isinstance(value, Reference):
        return {
            "reference": value.name,
            "overrides": {o.target: o.source for o in value.overrides},
        }
    if isinstance(value, dict):
        return {key: describe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [describe(item) for item in value]
    return value
