from dataclasses import dataclass
from typing import Literal


TransactKind = Literal["none", "grant", "game"]


@dataclass(frozen=True, eq=True)
class Coin:
    id: int
    unique_name: str
    name: str


@dataclass(frozen=True)
class Account:
    id: int
    balance: dict[str, int]


@dataclass(frozen=True)
class Transaction:
    id: int
    src: int
    dst: int
    coin_id: int
    coin_unique_name: str
    coin_read_name: str
    amount: int
    kind: TransactKind
    reason: str
    inner_hash: str
    create_dt: str
    transact_data: str
    tx: str


@dataclass(frozen=True)
class CardRecord:
    card_id: str
    owner: int | None
    burned: bool
    scratched: bool
    usd_amount: int
    payout_asset: str
    payout_amount: int
    cells: list[list[int]]
