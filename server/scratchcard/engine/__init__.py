from .admin import AdminConfigStore, build_rates
from .collaborators import CardRegistry, EventSink, GameStore, Ledger
from .errors import (
    AlreadyScratched,
    AuthorizationError,
    CardNotFound,
    DuplicateThreshold,
    InsufficientFunds,
    InsufficientResourceError,
    InsufficientTreasuryBalance,
    InvalidDenominator,
    InvalidRatio,
    LengthMismatch,
    LotteryError,
    MismatchedAssets,
    MissingConversionRate,
    NegativeOdds,
    NegativePayout,
    NotOwner,
    OddsExceedHundredPercent,
    StateConflictError,
    Unauthorized,
    ValidationError,
    ZeroAmount,
    ZeroCards,
)
from .events import LotteryEvent, Purchased, Scratched
from .game import ScratchCardGame
from .grid import COLUMNS, ROWS, GridGenerator, evaluate
from .odds import HUNDRED_PERCENT, OddsEntry, OddsTable, WeightedSelector, pick
from .payout import Payout, PayoutResolver
from .randomness import Randomness, SecretsRandomness
from .ratio import Ratio
from .state import Card, CardSummary, GameState
