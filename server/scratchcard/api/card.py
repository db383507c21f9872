from dataclasses import dataclass
from typing import Annotated

from fastapi import FastAPI, APIRouter, Depends, HTTPException

from ..database.account import account_exists
from ..database.adapters import open_game
from ..database.card import get_card as db_get_card, list_holder_cards
from ..engine.errors import LotteryError
from ..engine.state import CardSummary
from ..helper.db_helper import DB, get_tx_conn
from ..helper.jwt_helper import get_user
from ..schema.db import CardRecord
from .errors import to_http

card_app = FastAPI()

public_router = APIRouter()
protected_router = APIRouter(dependencies=[Depends(get_user)])


@dataclass
class BuyReq:
    num_cards: int


@dataclass
class TransferReq:
    new_owner: int


@dataclass
class CardResp:
    card_id: str
    owner: int | None
    scratched: bool
    # Outcome stays hidden until the card is scratched.
    usd_amount: int | None
    payout_asset: str | None
    payout_amount: int | None
    cells: list[list[int]] | None


@dataclass
class ScratchResp:
    card_id: str
    usd_amount: int
    payout_asset: str
    payout_amount: int
    cells: list[list[int]]


def _card_resp(record: CardRecord, reveal: bool) -> CardResp:
    show = reveal or record.scratched
    return CardResp(
        card_id=record.card_id,
        owner=record.owner,
        scratched=record.scratched,
        usd_amount=record.usd_amount if show else None,
        payout_asset=record.payout_asset if show else None,
        payout_amount=record.payout_amount if show else None,
        cells=record.cells if show else None,
    )


def _scratch_resp(card_id: str, summary: CardSummary) -> ScratchResp:
    return ScratchResp(
        card_id=card_id,
        usd_amount=summary.usd_amount,
        payout_asset=summary.payout_asset,
        payout_amount=summary.payout_amount,
        cells=[list(row) for row in summary.cells],
    )


@protected_router.post("/buy")
async def buy_cards(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
    req: BuyReq,
) -> list[CardResp]:
    if not await account_exists(conn, user_id):
        raise HTTPException(404, "Create an account before buying cards")
    try:
        cards = await open_game(conn).buy(user_id, req.num_cards)
    except LotteryError as e:
        raise to_http(e)
    return [
        CardResp(c.card_id, c.owner, False, None, None, None, None) for c in cards
    ]


@protected_router.post("/scratch/{card_id}")
async def scratch_card(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
    card_id: str,
) -> ScratchResp:
    try:
        summary = await open_game(conn).scratch(user_id, card_id)
    except LotteryError as e:
        raise to_http(e)
    return _scratch_resp(card_id, summary)


@protected_router.post("/transfer/{card_id}")
async def transfer_card(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
    card_id: str,
    req: TransferReq,
) -> CardResp:
    if not await account_exists(conn, req.new_owner):
        raise HTTPException(404, "Destination account not found")
    try:
        await open_game(conn).transfer_card(user_id, card_id, req.new_owner)
    except LotteryError as e:
        raise to_http(e)
    record = await db_get_card(conn, card_id)
    if record is None:
        raise HTTPException(500, "Unknown status: card vanished after transfer")
    return _card_resp(record, reveal=False)


@protected_router.get("/list/@me")
async def list_my_cards(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
    unscratched_only: bool = False,
) -> list[CardResp]:
    records = await list_holder_cards(
        conn, user_id, include_scratched=not unscratched_only
    )
    return [_card_resp(r, reveal=False) for r in records]


@public_router.get("/get/{card_id}")
async def get_card(
    conn: Annotated[DB, Depends(get_tx_conn)], card_id: str
) -> CardResp:
    record = await db_get_card(conn, card_id)
    if record is None:
        raise HTTPException(404, "The requested card cannot be found")
    return _card_resp(record, reveal=False)


card_app.include_router(protected_router)
card_app.include_router(public_router)
