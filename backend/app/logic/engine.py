"""Bet resolution engine for the three-reel slot."""
import math
from dataclasses import dataclass
from fractions import Fraction

from app.logic.models import (
    MIN_WIN_AMOUNT,
    REELS,
    SYMBOLS,
    TWO_OF_A_KIND_FACTOR,
    BetOptions,
    BetResult,
    SlotSymbol,
    WinType,
)
from app.logic.rng import ProductionRNG, RNGBase
from app.logic.weights import (
    validate_outcome_weights,
    validate_symbol_weights,
    weighted_draw,
)

# Draw order of the outcome weights, matches OutcomeKey order
OUTCOME_ORDER: tuple[WinType, ...] = (
    WinType.THREE_OF_A_KIND,
    WinType.TWO_OF_A_KIND,
    WinType.NO_WIN,
)


@dataclass(frozen=True)
class ValidatedWeights:
    """Weights that passed validation. None means uniform."""

    outcome: tuple[float, float, float] | None = None
    symbol: tuple[float, ...] | None = None


class SlotEngine:
    """
    Stateless three-reel bet resolver.

    Implements:
    - Forced win / forced loss
    - Weighted outcome selection (three of a kind, two of a kind, no win)
    - Weighted winning-symbol selection
    - Arrangement of the three reels for the chosen outcome
    - Payout calculation

    Holds only the injected RNG and the read-only symbol catalog, so one
    instance can serve any number of requests.
    """

    def __init__(
        self,
        rng: RNGBase | None = None,
        symbols: tuple[SlotSymbol, ...] = SYMBOLS,
    ):
        if len(symbols) < REELS:
            raise ValueError(
                f"Catalog needs at least {REELS} symbols, got {len(symbols)}"
            )
        self.rng = rng or ProductionRNG()
        self.symbols = symbols

    def validate(self, options: BetOptions) -> ValidatedWeights:
        """
        Validate both weight maps in options.

        Raises InvalidWeightsError before any random draw.
        """
        return ValidatedWeights(
            outcome=validate_outcome_weights(options.outcome_weights),
            symbol=validate_symbol_weights(options.symbol_weights, len(self.symbols)),
        )

    def place_bet(self, amount: int, options: BetOptions | None = None) -> BetResult:
        """
        Resolve a single bet.

        Args:
            amount: Stake, already checked against the allowed bets
            options: Force flags and weight overrides

        Returns:
            BetResult with reel symbols, win type and payout
        """
        options = options or BetOptions()
        weights = self.validate(options)
        return self.resolve(amount, options, weights)

    def resolve(
        self, amount: int, options: BetOptions, weights: ValidatedWeights
    ) -> BetResult:
        """Resolve a bet whose weights were already validated."""
        if options.autowin:
            winning_symbol = self._select_winning_symbol(weights.symbol)
            symbols = [winning_symbol] * REELS
            win_type = WinType.THREE_OF_A_KIND
        elif options.autolose:
            symbols = self._generate_no_win()
            winning_symbol = None
            win_type = WinType.NO_WIN
        else:
            win_type = self._determine_win_type(weights.outcome)
            symbols, winning_symbol = self._generate_symbols(win_type, weights.symbol)

        win_amount = self.calculate_win(amount, win_type, winning_symbol)
        return BetResult(
            symbols=symbols,
            bet_amount=amount,
            win_amount=win_amount,
            is_win=win_type != WinType.NO_WIN,
            win_type=win_type,
        )

    def outcome_weights(
        self, outcome: tuple[float, float, float] | None
    ) -> tuple[float, float, float]:
        """
        Unnormalized outcome weights for the current catalog.

        Base counts are the number of reel combinations of each kind under
        uniform draws, scaled by the optional per-outcome overrides. The
        overrides are divided by their largest value first so the products
        stay finite.
        """
        size = len(self.symbols)
        trip_w, pair_w, bust_w = outcome or (1.0, 1.0, 1.0)
        peak = max(trip_w, pair_w, bust_w)
        trip_w, pair_w, bust_w = trip_w / peak, pair_w / peak, bust_w / peak
        return (
            1 * trip_w,
            3 * (size - 1) * pair_w,
            (size - 1) * (size - 2) * bust_w,
        )

    def _determine_win_type(
        self, outcome: tuple[float, float, float] | None
    ) -> WinType:
        return OUTCOME_ORDER[weighted_draw(self.rng, self.outcome_weights(outcome))]

    def _select_winning_symbol(self, symbol_weights: tuple[float, ...] | None) -> int:
        weights = symbol_weights or (1.0,) * len(self.symbols)
        return weighted_draw(self.rng, weights)

    def _generate_symbols(
        self, win_type: WinType, symbol_weights: tuple[float, ...] | None
    ) -> tuple[list[int], int | None]:
        if win_type == WinType.NO_WIN:
            return self._generate_no_win(), None

        winning_symbol = self._select_winning_symbol(symbol_weights)
        if win_type == WinType.THREE_OF_A_KIND:
            return [winning_symbol] * REELS, winning_symbol

        return self._generate_two_of_a_kind(winning_symbol), winning_symbol

    def _generate_two_of_a_kind(self, winning_symbol: int) -> list[int]:
        """One reel shows a different symbol, picked uniformly."""
        others = [i for i in range(len(self.symbols)) if i != winning_symbol]
        different_symbol = others[self.rng.randbelow(len(others))]

        symbols = [winning_symbol] * REELS
        symbols[self.rng.randbelow(REELS)] = different_symbol
        return symbols

    def _generate_no_win(self) -> list[int]:
        """Three distinct indices drawn without replacement, in reel order."""
        available = list(range(len(self.symbols)))
        symbols = []
        for _ in range(REELS):
            symbols.append(available.pop(self.rng.randbelow(len(available))))
        return symbols

    def calculate_win(
        self, amount: int, win_type: WinType, winning_symbol: int | None
    ) -> int:
        """
        Payout for a resolved outcome.

        No win pays 0. Three of a kind pays floor(amount * value) and two of
        a kind pays floor(amount * value * 1/5). A win never pays less than
        MIN_WIN_AMOUNT: at stake 1 a cherry, orange or lemon pair would
        otherwise floor to 0, and every win must pay something.
        """
        if win_type == WinType.NO_WIN or winning_symbol is None:
            return 0

        # Exact arithmetic so floor never lands one below on float error
        multiplier = Fraction(self.symbols[winning_symbol].value)
        if win_type == WinType.TWO_OF_A_KIND:
            multiplier *= TWO_OF_A_KIND_FACTOR
        win_amount = math.floor(Fraction(amount) * multiplier)

        # Low pairs on the smallest stake would floor to zero
        return max(win_amount, MIN_WIN_AMOUNT)
