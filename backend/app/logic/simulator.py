"""Batch spins: run many bets with the same parameters and aggregate."""
from app.logic.engine import SlotEngine
from app.logic.models import BetOptions, SpinStats


def run_many_spins(
    engine: SlotEngine,
    amount: int,
    options: BetOptions | None = None,
    spins: int = 1000,
) -> SpinStats:
    """
    Resolve `spins` bets and return aggregate statistics.

    Weights are validated once up front, so a malformed map fails the
    whole batch before the first spin. Bounds on `spins` are enforced by
    the caller.
    """
    options = options or BetOptions()
    weights = engine.validate(options)

    total_win_amount = 0
    total_wins = 0
    for _ in range(spins):
        result = engine.resolve(amount, options, weights)
        total_win_amount += result.win_amount
        if result.is_win:
            total_wins += 1

    total_bet_amount = amount * spins
    return SpinStats(
        total_spins=spins,
        total_win_amount=total_win_amount,
        total_bet_amount=total_bet_amount,
        expectation=(total_win_amount - total_bet_amount) / spins,
        win_rate=(total_wins / spins) * 100,
        return_to_player=total_win_amount / total_bet_amount * 100,
    )
