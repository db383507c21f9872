import secrets
from typing import Protocol


class Randomness(Protocol):
    def draw(self, upper: int) -> int:
        """Return a uniform integer in [0, upper)."""
        ...


class SecretsRandomness:
    """OS-backed CSPRNG; nothing about a roll is known before it is drawn."""

    def draw(self, upper: int) -> int:
        if upper <= 0:
            raise ValueError("upper must be > 0")
        return secrets.randbelow(upper)
