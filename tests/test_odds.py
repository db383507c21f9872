import random
from collections import Counter

import pytest
from conftest import ScriptedRandomness

from scratchcard.engine import (
    HUNDRED_PERCENT,
    DuplicateThreshold,
    LengthMismatch,
    NegativeOdds,
    OddsExceedHundredPercent,
    OddsTable,
    WeightedSelector,
    pick,
)


def test_build_sorts_by_threshold() -> None:
    table = OddsTable.build([30000, 10000, 20000], ["c", "a", "b"])
    assert table.thresholds == [10000, 20000, 30000]
    assert table.values == ["a", "b", "c"]
    assert table.total == 60000


def test_build_rejects_length_mismatch() -> None:
    with pytest.raises(LengthMismatch):
        OddsTable.build([10000, 20000], [1])


def test_build_rejects_duplicate_thresholds() -> None:
    with pytest.raises(DuplicateThreshold):
        OddsTable.build([10000, 10000], [1, 2])


def test_build_rejects_negative_odds() -> None:
    with pytest.raises(NegativeOdds):
        OddsTable.build([-1, 50000], [1, 2])


def test_build_rejects_more_than_hundred_percent() -> None:
    with pytest.raises(OddsExceedHundredPercent):
        OddsTable.build([60000, 40001], [1, 2])


def test_build_accepts_exactly_hundred_percent() -> None:
    table = OddsTable.build([60000, 40000], [1, 2])
    assert table.total == HUNDRED_PERCENT


@pytest.mark.parametrize(
    "roll,expected",
    [
        (0, "a"),
        (9999, "a"),
        (10000, "b"),
        (29999, "b"),
        (30000, "c"),
        (59999, "c"),
        (60000, None),
        (HUNDRED_PERCENT - 1, None),
    ],
)
def test_pick_bucket_boundaries(roll: int, expected: str | None) -> None:
    table = OddsTable.build([10000, 20000, 30000], ["a", "b", "c"])
    assert pick(table, roll) == expected


def test_pick_subtracts_threshold_not_position() -> None:
    # Buckets: [0, 40000) -> y, [40000, 90000) -> x.
    table = OddsTable.build([50000, 40000], ["x", "y"])
    assert pick(table, 39999) == "y"
    assert pick(table, 45000) == "x"
    assert pick(table, 89999) == "x"
    assert pick(table, 90000) is None


def test_pick_on_empty_table_always_misses() -> None:
    assert pick(OddsTable(), 0) is None


@pytest.mark.parametrize("roll", [-1, HUNDRED_PERCENT])
def test_pick_rejects_out_of_range_roll(roll: int) -> None:
    with pytest.raises(ValueError):
        pick(OddsTable.build([1], [1]), roll)


def test_pick_frequencies_converge_to_odds() -> None:
    table = OddsTable.build([5000, 20000, 40000], ["rare", "mid", "common"])
    rng = random.Random(1234)
    draws = 200_000
    counts = Counter(pick(table, rng.randrange(HUNDRED_PERCENT)) for _ in range(draws))
    for entry in table:
        assert abs(counts[entry.value] / draws - entry.threshold / HUNDRED_PERCENT) < 0.005
    assert abs(counts[None] / draws - 0.35) < 0.005


def test_selector_draws_fresh_roll_each_time() -> None:
    randomness = ScriptedRandomness([0, 99_999, 5])
    selector = WeightedSelector(randomness)
    table = OddsTable.build([10000], [7])
    assert [selector.draw(table) for _ in range(3)] == [7, None, 7]
    assert randomness.calls == [HUNDRED_PERCENT] * 3
