"""
Lazy, replayable token streams for the prsly parser combinators.

A stream is a position in an ordered sequence of tokens. It exposes the current
token (`head`) and everything after it (`tail`). Both are produced on demand
from a producer function and memoized, so a stream never changes once it has
been looked at. Parsers backtrack by simply holding on to an earlier stream.

Classes:
    Sentinel: Distinguished marker values (end of stream, no match, no value).
    Stream: A memoized position in a token sequence backed by a producer.

Functions:
    from_string(text): Producer yielding the characters of `text`.
    from_list(items): Producer yielding the elements of `items`.
    to_stream(source): Coerce a Stream, string or iterable into a Stream.

Exports:
    - END_OF_STREAM
    - NO_MATCH
    - NO_VALUE
    - Stream

Example:
    >>> stream = Stream.from_string("ab")
    >>> stream.head()
    'a'
    >>> stream.tail().head()
    'b'
    >>> stream.tail().tail().at_end()
    True
"""

from collections.abc import Callable, Iterable
from typing import Any, Union

Producer = Callable[[], Any]


class Sentinel:
    """A named marker value compared by identity.

    Attributes:
        name (str): Name shown in `repr` and error messages.
    """

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return self.name

    def __bool__(self) -> bool:
        return False


END_OF_STREAM = Sentinel("END_OF_STREAM")
"""Returned by a producer once the sequence is exhausted."""

NO_MATCH = Sentinel("NO_MATCH")
"""Takes the place of the remaining stream in a failed parse result."""

NO_VALUE = Sentinel("NO_VALUE")
"""Value of a successful match that contributes nothing (e.g. a delimiter)."""

_UNSET = Sentinel("_UNSET")


class Stream:
    """
    An immutable, lazily evaluated position in a token sequence.

    The producer is shared by every stream of the same input and is called at most
    once per position: the first `head()` call on a stream pulls one token and
    caches it, the first `tail()` call builds and caches the next stream. Querying
    the same stream again always returns the same token and the same continuation.

    Attributes:
        producer (Callable[[], Any]): Pull function returning the next token, or
            `END_OF_STREAM` once exhausted.
    """

    __slots__ = ("producer", "_head", "_tail")

    def __init__(self, producer: Producer) -> None:
        self.producer = producer
        self._head: Any = _UNSET
        self._tail: Union["Stream", Sentinel] = _UNSET

    @classmethod
    def from_string(cls, text: str) -> "Stream":
        """Builds a stream over the characters of `text`."""
        return cls(from_string(text))

    @classmethod
    def from_list(cls, items: Iterable[Any]) -> "Stream":
        """Builds a stream over the elements of `items`."""
        return cls(from_list(items))

    def head(self) -> Any:
        """Returns the current token, pulling it from the producer on first use.

        Returns:
            Any: The token at this position, or `END_OF_STREAM`.
        """
        if self._head is _UNSET:
            self._head = self.producer()
        return self._head

    def tail(self) -> Union["Stream", Sentinel]:
        """Returns the stream following the current token.

        Returns:
            Stream | Sentinel: The continuation, or `END_OF_STREAM` when this stream
            is already at its end.
        """
        if self._tail is _UNSET:
            if self.head() is END_OF_STREAM:
                self._tail = END_OF_STREAM
            else:
                self._tail = Stream(self.producer)
        return self._tail

    def at_end(self) -> bool:
        return self.head() is END_OF_STREAM

    def remaining(self) -> list[Any]:
        """Collects the tokens from this position to the end of the stream.

        Walks the memoized chain, so calling this does not disturb other holders
        of earlier or later streams.
        """
        tokens = []
        stream: Stream | Sentinel = self
        while isinstance(stream, Stream) and not stream.at_end():
            tokens.append(stream.head())
            stream = stream.tail()
        return tokens

    def __repr__(self) -> str:
        if self._head is _UNSET:
            return "Stream(<unread>)"
        return f"Stream(head={self._head!r})"


def from_list(items: Iterable[Any]) -> Producer:
    """Creates a producer yielding each element of `items`, then `END_OF_STREAM`.

    Args:
        items (Iterable[Any]): Any iterable; it is consumed lazily, one element per
            producer call.

    Returns:
        Callable[[], Any]: The producer.
    """
    iterator = iter(items)

    def producer() -> Any:
        return next(iterator, END_OF_STREAM)

    return producer


def from_string(text: str) -> Producer:
    """Creates a producer yielding the characters of `text`, then `END_OF_STREAM`."""
    return from_list(text)


def to_stream(source: Union[Stream, str, Iterable[Any]]) -> Stream:
    """Coerces parser input into a Stream.

    Args:
        source: An existing Stream (returned as is), a string (one token per
            character), or any other iterable (one token per element).

    Returns:
        Stream: A stream positioned at the start of `source`.

    Raises:
        TypeError: If `source` is none of the accepted kinds.
    """
    if isinstance(source, Stream):
        return source
    if isinstance(source, str):
        return Stream.from_string(source)
    if isinstance(source, Iterable):
        return Stream.from_list(source)
    raise TypeError(f"Cannot build a stream from {type(source).__name__}")
