import pytest

from scratchcard.engine import InvalidRatio, Ratio


def test_multiply_examples() -> None:
    assert Ratio(1, 2).multiply(100) == 50
    assert Ratio(3, 7).multiply(0) == 0
    assert Ratio(3, 2).multiply(100) == 150


def test_multiply_truncates_toward_zero() -> None:
    assert Ratio(1, 3).multiply(10) == 3
    assert Ratio(2, 3).multiply(1) == 0


def test_multiply_keeps_full_precision_for_u64_inputs() -> None:
    big = 2**64 - 1
    assert Ratio(3, 7).multiply(big) == big * 3 // 7
    assert Ratio(2**64 - 1, 2**64 - 1).multiply(big) == big


def test_zero_denominator_rejected() -> None:
    with pytest.raises(InvalidRatio):
        Ratio(1, 0)


def test_negative_terms_rejected() -> None:
    with pytest.raises(InvalidRatio):
        Ratio(-1, 2)
    with pytest.raises(ValueError):
        Ratio(1, 2).multiply(-5)


def test_ratio_is_immutable() -> None:
    rate = Ratio(1, 2)
    with pytest.raises(AttributeError):
        rate.numerator = 5  # type: ignore[misc]
