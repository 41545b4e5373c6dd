"""Many-to-many mapping between statement labels."""

from __future__ import annotations

from typing import Iterable, Iterator, NamedTuple

LABEL_UNDEFINED = -1


class LabelPair(NamedTuple):
    original: int
    mapped: int


class LabelMapping:
    """Ordered collection of (original, mapped) label pairs.

    Repeated values are allowed on both sides.
    """

    def __init__(self, pairs: Iterable[tuple[int, int]] = ()) -> None:
        self._pairs = [LabelPair(original, mapped) for original, mapped in pairs]

    def add(self, original: int, mapped: int) -> None:
        self._pairs.append(LabelPair(original, mapped))

    def extend(self, other: Iterable[tuple[int, int]]) -> None:
        self._pairs.extend(LabelPair(original, mapped) for original, mapped in other)

    def find_original(self, mapped: int) -> int | None:
        """Return the original label of the first pair mapping to ``mapped``."""
        return next(
            (pair.original for pair in self._pairs if pair.mapped == mapped), None
        )

    def __iter__(self) -> Iterator[LabelPair]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LabelMapping):
            return NotImplemented
        return self._pairs == other._pairs

    def __repr__(self) -> str:
        return f"LabelMapping({[tuple(pair) for pair in self._pairs]!r})"