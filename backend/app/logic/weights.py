"""Weight validation and the weighted-draw primitive.

Outcome weights and symbol weights arrive as raw JSON maps. Both are
validated in full before the engine draws anything, so a malformed map
never consumes randomness.
"""
import math
from collections.abc import Mapping, Sequence
from typing import Any

from app.errors import InvalidWeightsError
from app.logic.models import OutcomeKey
from app.logic.rng import RNGBase


OUTCOME_KEYS: tuple[str, ...] = tuple(key.value for key in OutcomeKey)


def weighted_draw(rng: RNGBase, weights: Sequence[float]) -> int:
    """
    Pick an index with probability proportional to its weight.

    Draws roll in [0, total) and returns the first index whose running
    sum exceeds roll. Zero weights are never picked. For integer weights
    this picks what an integer roll in [0, total) would; the roll
    is left unfloored so fractional weights keep their proportions.

    Weights are divided by the largest one first, so finite weights near
    the float limit cannot sum to inf.
    """
    peak = max(weights, default=0)
    if not peak > 0:
        raise ValueError("weighted_draw needs at least one positive weight")
    scaled = [weight / peak for weight in weights]
    roll = rng.random() * sum(scaled)

    cumulative = 0.0
    for index, weight in enumerate(scaled):
        cumulative += weight
        if roll < cumulative:
            return index

    # Only reachable through float rounding at the upper edge
    return max(index for index, weight in enumerate(scaled) if weight > 0)


def _check_value(label: str, key: str, value: Any) -> float:
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidWeightsError(f"{label} '{key}' must be a number")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # ints past the float range
        raise InvalidWeightsError(
            f"{label} '{key}' must be a finite positive number"
        ) from None
    if not finite or value <= 0:
        raise InvalidWeightsError(
            f"{label} '{key}' must be a finite positive number, got {value}"
        )
    return float(value)


def _check_keys(label: str, raw: Mapping[str, Any], required: Sequence[str]) -> None:
    missing = [key for key in required if key not in raw]
    if missing:
        raise InvalidWeightsError(f"{label} missing required key '{missing[0]}'")
    extra = [key for key in raw if key not in required]
    if extra:
        raise InvalidWeightsError(f"{label} has unexpected key '{extra[0]}'")


def validate_outcome_weights(
    raw: Mapping[str, Any] | None,
) -> tuple[float, float, float] | None:
    """
    Validate an outcome-weights map.

    Returns (threeOfAKind, twoOfAKind, noWin) weights, or None when no
    map was supplied.
    """
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise InvalidWeightsError("outcomeWeights must be an object")

    _check_keys("outcomeWeights", raw, OUTCOME_KEYS)
    trip, pair, bust = (
        _check_value("outcomeWeights", key, raw[key]) for key in OUTCOME_KEYS
    )
    return trip, pair, bust


def validate_symbol_weights(
    raw: Mapping[Any, Any] | None, size: int
) -> tuple[float, ...] | None:
    """
    Validate a per-symbol weights map against catalog indices 0..size-1.

    JSON object keys are strings, so "3" and 3 name the same index.
    Every index is required; there is no default for missing ones.
    """
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise InvalidWeightsError("symbolWeights must be an object")

    normalized: dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(key, bool):
            raise InvalidWeightsError(f"symbolWeights has unexpected key '{key}'")
        name = str(key)
        if name in normalized:
            raise InvalidWeightsError(f"symbolWeights has duplicate key '{name}'")
        normalized[name] = value

    required = [str(index) for index in range(size)]
    _check_keys("symbolWeights", normalized, required)
    return tuple(
        _check_value("symbolWeights", key, normalized[key]) for key in required
    )
