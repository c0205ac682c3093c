"""Request and response models for the bet API."""
from typing import Any

from pydantic import BaseModel, Field, StrictInt

from app.config import settings
from app.logic.models import BetOptions, BetResult, SpinStats, WinType


# === Request Models ===


class PlaceBetRequest(BaseModel):
    """POST /api/bet/place request body."""

    # Left raw so a string, bool or fractional stake surfaces as INVALID_BET
    amount: Any = Field(default=None, description="Must be in allowedBets")
    autowin: bool = Field(default=False)
    autolose: bool = Field(default=False)
    # Weight maps stay raw so malformed ones surface as INVALID_WEIGHTS
    outcomeWeights: dict[str, Any] | None = None
    symbolWeights: dict[str, Any] | None = None

    def to_options(self) -> BetOptions:
        """Convert to engine options."""
        return BetOptions(
            autowin=self.autowin,
            autolose=self.autolose,
            outcome_weights=self.outcomeWeights,
            symbol_weights=self.symbolWeights,
        )


class ManySpinsRequest(PlaceBetRequest):
    """POST /api/bet/many-spins request body."""

    spins: StrictInt = Field(default=settings.default_spins)


# === Response Models ===


class PlaceBetResponse(BaseModel):
    """POST /api/bet/place response."""

    symbols: list[int]
    betAmount: int
    winAmount: int
    isWin: bool
    winType: WinType

    @classmethod
    def from_result(cls, result: BetResult) -> "PlaceBetResponse":
        return cls(
            symbols=result.symbols,
            betAmount=result.bet_amount,
            winAmount=result.win_amount,
            isWin=result.is_win,
            winType=result.win_type,
        )


class SpinStatsResponse(BaseModel):
    """POST /api/bet/many-spins response."""

    totalSpins: int
    totalWinAmount: int
    totalBetAmount: int
    expectation: float
    winRate: float
    returnToPlayer: float

    @classmethod
    def from_stats(cls, stats: SpinStats) -> "SpinStatsResponse":
        return cls(
            totalSpins=stats.total_spins,
            totalWinAmount=stats.total_win_amount,
            totalBetAmount=stats.total_bet_amount,
            expectation=stats.expectation,
            winRate=stats.win_rate,
            returnToPlayer=stats.return_to_player,
        )
