"""Bet models: symbol catalog, win types, results and batch stats."""
from enum import Enum
from fractions import Fraction
from typing import Any, NamedTuple

from pydantic import BaseModel, Field


class SlotSymbol(NamedTuple):
    """Catalog entry: display glyph plus three-of-a-kind multiplier."""
    name: str
    glyph: str
    value: int


# Ordered catalog. Reel results are indices into this tuple.
SYMBOLS: tuple[SlotSymbol, ...] = (
    SlotSymbol("cherry", "\U0001f352", 2),
    SlotSymbol("orange", "\U0001f34a", 3),
    SlotSymbol("lemon", "\U0001f34b", 4),
    SlotSymbol("grapes", "\U0001f347", 5),
    SlotSymbol("seven", "7️⃣", 10),
    SlotSymbol("diamond", "\U0001f48e", 20),
)

REELS = 3

# Two of a kind pays this fraction of the three-of-a-kind value
TWO_OF_A_KIND_FACTOR = Fraction(1, 5)

# Smallest payout of a winning bet
MIN_WIN_AMOUNT = 1


class WinType(str, Enum):
    """Win classification of a resolved bet."""
    THREE_OF_A_KIND = "THREE_OF_A_KIND"
    TWO_OF_A_KIND = "TWO_OF_A_KIND"
    NO_WIN = "NO_WIN"


class OutcomeKey(str, Enum):
    """Keys accepted in an outcome-weights map, one per WinType."""
    THREE_OF_A_KIND = "threeOfAKind"
    TWO_OF_A_KIND = "twoOfAKind"
    NO_WIN = "noWin"


class BetOptions(BaseModel):
    """
    Optional bet parameters shared by single bets and batch runs.

    Weight maps are kept raw here; they are validated by
    app.logic.weights before any random draw.
    """
    autowin: bool = False
    autolose: bool = False
    outcome_weights: dict[str, Any] | None = None
    symbol_weights: dict[Any, Any] | None = None


class BetResult(BaseModel):
    """Result of resolving a single bet."""
    symbols: list[int] = Field(default_factory=list)
    bet_amount: int
    win_amount: int = 0
    is_win: bool = False
    win_type: WinType = WinType.NO_WIN


class SpinStats(BaseModel):
    """Aggregate statistics for a batch of spins."""
    total_spins: int
    total_win_amount: int
    total_bet_amount: int
    expectation: float
    win_rate: float
    return_to_player: float
