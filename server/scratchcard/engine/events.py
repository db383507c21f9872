from dataclasses import dataclass
from typing import ClassVar, Literal, Union


@dataclass(frozen=True)
class Purchased:
    kind: ClassVar[Literal["purchased"]] = "purchased"
    owner: int
    card: str
    usd_amount: int
    payout_asset: str
    payout_amount: int


@dataclass(frozen=True)
class Scratched:
    kind: ClassVar[Literal["scratched"]] = "scratched"
    owner: int
    card: str
    usd_amount: int
    payout_asset: str
    payout_amount: int


LotteryEvent = Union[Purchased, Scratched]
