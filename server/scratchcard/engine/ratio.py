from dataclasses import dataclass

from .errors import InvalidRatio


@dataclass(frozen=True, eq=True)
class Ratio:
    """Exact rational conversion rate from the default asset into another one."""

    numerator: int
    denominator: int

    def __post_init__(self):
        if self.denominator == 0:
            raise InvalidRatio("Ratio denominator cannot be 0")
        if self.numerator < 0 or self.denominator < 0:
            raise InvalidRatio(
                f"Ratio terms must be unsigned, got {self.numerator}/{self.denominator}"
            )

    def multiply(self, value: int) -> int:
        # Truncates toward zero; python ints never overflow the intermediate product.
        if value < 0:
            raise ValueError("value must be >= 0")
        return value * self.numerator // self.denominator

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"
