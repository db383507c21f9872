from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from .randomness import Randomness
from .errors import (
    DuplicateThreshold,
    LengthMismatch,
    NegativeOdds,
    OddsExceedHundredPercent,
)

T = TypeVar("T")

# 100% probability mass, in parts per hundred thousand.
HUNDRED_PERCENT = 100_000


@dataclass(frozen=True)
class OddsEntry(Generic[T]):
    threshold: int
    value: T


@dataclass(frozen=True)
class OddsTable(Generic[T]):
    """
    Discrete distribution over values, one bucket per entry.

    Entries are kept sorted by ascending threshold with unique thresholds;
    whatever mass is left below HUNDRED_PERCENT is the implicit miss.
    Use `OddsTable.build` to construct a validated table.
    """

    entries: tuple[OddsEntry[T], ...] = ()

    @classmethod
    def build(cls, odds: Sequence[int], values: Sequence[T]) -> "OddsTable[T]":
        if len(odds) != len(values):
            raise LengthMismatch(
                f"Got {len(odds)} odds for {len(values)} values"
            )
        seen: set[int] = set()
        for threshold in odds:
            if threshold < 0:
                raise NegativeOdds(f"Odds must be unsigned, got {threshold}")
            if threshold in seen:
                raise DuplicateThreshold(f"Odds {threshold} appears more than once")
            seen.add(threshold)
        total = sum(odds)
        if total > HUNDRED_PERCENT:
            raise OddsExceedHundredPercent(
                f"Odds sum to {total}, above {HUNDRED_PERCENT}"
            )
        entries = sorted(
            (OddsEntry(threshold, value) for threshold, value in zip(odds, values)),
            key=lambda e: e.threshold,
        )
        return cls(tuple(entries))

    def __iter__(self) -> Iterator[OddsEntry[T]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def total(self) -> int:
        return sum(e.threshold for e in self.entries)

    @property
    def values(self) -> list[T]:
        return [e.value for e in self.entries]

    @property
    def thresholds(self) -> list[int]:
        return [e.threshold for e in self.entries]


def pick(table: OddsTable[T], roll: int) -> T | None:
    """
    Map a roll in [0, HUNDRED_PERCENT) onto the table's buckets.

    Returns the value of the bucket the roll lands in, or None when it lands in
    the miss mass past the last bucket.
    """
    if not 0 <= roll < HUNDRED_PERCENT:
        raise ValueError(f"roll must be in [0, {HUNDRED_PERCENT}), got {roll}")
    counter = roll
    for entry in table.entries:
        if counter < entry.threshold:
            return entry.value
        counter -= entry.threshold
    return None


class WeightedSelector:
    def __init__(self, randomness: Randomness):
        self._randomness = randomness

    def draw(self, table: OddsTable[T]) -> T | None:
        # Every draw asks the source for a fresh roll.
        return pick(table, self._randomness.draw(HUNDRED_PERCENT))
