#!/usr/bin/env python3
"""
RTP simulation script.

Runs a seeded batch of bets headlessly, prints the batch statistics
next to the exact theoretical RTP, and optionally writes a one-row CSV.

Usage:
    python -m scripts.rtp_sim --amount 5 --spins 100000 --seed RTP_2025
    python -m scripts.rtp_sim --amount 10 --spins 50000 --seed RTP_2025 --out out/rtp.csv
    python -m scripts.rtp_sim --amount 1 --spins 100000 --seed RTP_2025 \\
        --outcome-weights '{"threeOfAKind": 2, "twoOfAKind": 1, "noWin": 1}'
"""
import argparse
import csv
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import settings
from app.config_hash import get_config_hash
from app.errors import GameError
from app.logic.engine import OUTCOME_ORDER, SlotEngine
from app.logic.models import BetOptions, SpinStats, WinType
from app.logic.rng import SeededRNG, seed_to_int
from app.logic.simulator import run_many_spins


def get_timestamp_iso() -> str:
    """Get ISO 8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def theoretical_rtp(amount: int, options: BetOptions | None = None) -> float:
    """
    Exact expected return-to-player, in percent, for one bet.

    Uses the engine's own outcome weights and payout rule, so floors and
    the minimum win are accounted for at this stake.
    """
    options = options or BetOptions()
    engine = SlotEngine(rng=SeededRNG(seed=0))
    weights = engine.validate(options)

    size = len(engine.symbols)
    symbol_weights = weights.symbol or (1.0,) * size
    peak = max(symbol_weights)
    symbol_weights = tuple(weight / peak for weight in symbol_weights)
    symbol_total = sum(symbol_weights)

    if options.autowin:
        outcome_probs = {WinType.THREE_OF_A_KIND: 1.0}
    elif options.autolose:
        outcome_probs = {WinType.NO_WIN: 1.0}
    else:
        outcome_weights = engine.outcome_weights(weights.outcome)
        outcome_total = sum(outcome_weights)
        outcome_probs = {
            win_type: weight / outcome_total
            for win_type, weight in zip(OUTCOME_ORDER, outcome_weights)
        }

    expected_win = 0.0
    for win_type, p_outcome in outcome_probs.items():
        if win_type == WinType.NO_WIN:
            continue
        for index in range(size):
            p_symbol = symbol_weights[index] / symbol_total
            payout = engine.calculate_win(amount, win_type, index)
            expected_win += p_outcome * p_symbol * payout

    return expected_win / amount * 100


def run_simulation(
    amount: int,
    spins: int,
    seed_str: str,
    options: BetOptions | None = None,
) -> SpinStats:
    """
    Run a seeded batch of bets.

    Args:
        amount: Stake per bet
        spins: Number of bets
        seed_str: Seed string for reproducibility
        options: Force flags and weight overrides

    Returns:
        SpinStats for the batch
    """
    engine = SlotEngine(rng=SeededRNG(seed=seed_to_int(seed_str)))
    return run_many_spins(engine, amount, options, spins)


def generate_csv(
    amount: int,
    seed_str: str,
    stats: SpinStats,
    expected_rtp: float,
    output_path: str,
) -> None:
    """Write a one-row CSV of the simulation."""
    row = {
        "timestamp": get_timestamp_iso(),
        "config_hash": get_config_hash(),
        "seed": seed_str,
        "amount": amount,
        "spins": stats.total_spins,
        "total_bet": f"{stats.total_bet_amount:.2f}",
        "total_win": stats.total_win_amount,
        "expectation": f"{stats.expectation:.6f}",
        "win_rate": f"{stats.win_rate:.4f}",
        "rtp": f"{stats.return_to_player:.4f}",
        "rtp_theoretical": f"{expected_rtp:.4f}",
    }

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=row.keys())
        writer.writeheader()
        writer.writerow(row)

    print(f"CSV written to: {output_path}")


def _json_arg(value: str) -> dict:
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise argparse.ArgumentTypeError("expected a JSON object")
    return parsed


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seeded RTP simulation")
    parser.add_argument(
        "--amount",
        type=int,
        choices=settings.allowed_bets,
        required=True,
        help="Stake per bet",
    )
    parser.add_argument(
        "--spins",
        type=int,
        default=settings.default_spins,
        help="Number of bets to simulate",
    )
    parser.add_argument(
        "--seed",
        type=str,
        required=True,
        help="Seed string for reproducibility",
    )
    force = parser.add_mutually_exclusive_group()
    force.add_argument("--autowin", action="store_true", help="Force every bet to win")
    force.add_argument("--autolose", action="store_true", help="Force every bet to lose")
    parser.add_argument(
        "--outcome-weights",
        type=_json_arg,
        default=None,
        help='JSON object, e.g. {"threeOfAKind": 1, "twoOfAKind": 1, "noWin": 1}',
    )
    parser.add_argument(
        "--symbol-weights",
        type=_json_arg,
        default=None,
        help='JSON object keyed by symbol index, e.g. {"0": 1, ..., "5": 1}',
    )
    parser.add_argument(
        "--out",
        type=str,
        default=None,
        help="Optional output CSV path",
    )

    args = parser.parse_args(argv)

    if not settings.min_spins <= args.spins <= settings.max_spins:
        parser.error(
            f"--spins must be between {settings.min_spins} and {settings.max_spins}"
        )

    options = BetOptions(
        autowin=args.autowin,
        autolose=args.autolose,
        outcome_weights=args.outcome_weights,
        symbol_weights=args.symbol_weights,
    )

    print(f"Running simulation: amount={args.amount}, spins={args.spins}, seed={args.seed}")
    print(f"Config hash: {get_config_hash()}")

    try:
        expected_rtp = theoretical_rtp(args.amount, options)
        stats = run_simulation(args.amount, args.spins, args.seed, options)
    except GameError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 2

    if args.out:
        generate_csv(args.amount, args.seed, stats, expected_rtp, args.out)

    print(f"\nSummary:")
    print(f"  Spins: {stats.total_spins}")
    print(f"  Total bet: {stats.total_bet_amount:.2f}")
    print(f"  Total win: {stats.total_win_amount}")
    print(f"  Expectation per spin: {stats.expectation:.4f}")
    print(f"  Win rate: {stats.win_rate:.4f}%")
    print(f"  RTP: {stats.return_to_player:.4f}%")
    print(f"  RTP (theoretical): {expected_rtp:.4f}%")
    return 0


if __name__ == "__main__":
    sys.exit(main())
