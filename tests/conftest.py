from collections.abc import Callable, Iterable
from typing import Any

import pytest

from prsly.prsly_stream import END_OF_STREAM


class CountingProducer:
    """Producer that records how many times it has been pulled."""

    def __init__(self, items: Iterable[Any]) -> None:
        self.items = iter(items)
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        return next(self.items, END_OF_STREAM)


@pytest.fixture  # type: ignore[misc]
def counting_producer() -> Callable[[Iterable[Any]], CountingProducer]:
    return CountingProducer
