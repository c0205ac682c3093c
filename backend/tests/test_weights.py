"""Weight validation and weighted draw tests."""
from collections import Counter

import pytest

from app.errors import ErrorCode, InvalidWeightsError
from app.logic.rng import SeededRNG
from app.logic.weights import (
    validate_outcome_weights,
    validate_symbol_weights,
    weighted_draw,
)
from conftest import ScriptedRNG


VALID_OUTCOME = {"threeOfAKind": 1, "twoOfAKind": 2.5, "noWin": 3}


class TestWeightedDraw:
    """Cumulative-sum scan over the weights."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.0, 0), (0.1, 1), (0.44, 1), (0.45, 2), (0.99, 2)],
    )
    def test_picks_first_cumulative_above_roll(self, value: float, expected: int):
        # weights 1, 15, 20 -> boundaries at 1/36 and 16/36 (~0.444)
        rng = ScriptedRNG(floats=[value])
        assert weighted_draw(rng, [1, 15, 20]) == expected

    def test_zero_weight_never_selected(self):
        rng = SeededRNG(seed=99)
        counts = Counter(weighted_draw(rng, [0, 1, 1, 1, 0, 1]) for _ in range(20000))

        assert counts[0] == 0
        assert counts[4] == 0
        assert set(counts) == {1, 2, 3, 5}

    def test_fractional_weights_keep_proportions(self):
        rng = SeededRNG(seed=5)
        counts = Counter(weighted_draw(rng, [0.25, 0.75]) for _ in range(20000))

        assert 0.22 < counts[0] / 20000 < 0.28

    def test_weights_near_float_limit(self):
        # unscaled these sum to inf and every roll would land on the last index
        assert weighted_draw(ScriptedRNG(floats=[0.1]), [1e308, 1e308, 1e308]) == 0
        assert weighted_draw(ScriptedRNG(floats=[0.5]), [1e308, 1e308, 1e308]) == 1
        assert weighted_draw(ScriptedRNG(floats=[0.9]), [1e308, 1e308, 1e308]) == 2

    def test_all_zero_weights_rejected(self):
        with pytest.raises(ValueError):
            weighted_draw(ScriptedRNG(floats=[0.5]), [0, 0, 0])


class TestOutcomeWeights:
    """outcomeWeights validation."""

    def test_none_means_not_supplied(self):
        assert validate_outcome_weights(None) is None

    def test_valid_map_returns_ordered_tuple(self):
        assert validate_outcome_weights(VALID_OUTCOME) == (1.0, 2.5, 3.0)

    @pytest.mark.parametrize("missing", ["threeOfAKind", "twoOfAKind", "noWin"])
    def test_missing_key_names_it(self, missing: str):
        raw = {k: v for k, v in VALID_OUTCOME.items() if k != missing}
        with pytest.raises(InvalidWeightsError, match=missing):
            validate_outcome_weights(raw)

    def test_extra_key_rejected(self):
        raw = dict(VALID_OUTCOME, bonus=1)
        with pytest.raises(InvalidWeightsError, match="bonus"):
            validate_outcome_weights(raw)

    @pytest.mark.parametrize(
        "value",
        [0, -1, float("nan"), float("inf"), float("-inf"), True, "1", None, [1]],
    )
    def test_bad_value_rejected(self, value):
        raw = dict(VALID_OUTCOME, noWin=value)
        with pytest.raises(InvalidWeightsError, match="noWin"):
            validate_outcome_weights(raw)

    def test_int_beyond_float_range_rejected(self):
        raw = dict(VALID_OUTCOME, noWin=10**400)
        with pytest.raises(InvalidWeightsError, match="noWin"):
            validate_outcome_weights(raw)

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidWeightsError):
            validate_outcome_weights([1, 2, 3])

    def test_error_maps_to_invalid_weights_code(self):
        with pytest.raises(InvalidWeightsError) as exc_info:
            validate_outcome_weights({})
        assert exc_info.value.code == ErrorCode.INVALID_WEIGHTS
        assert exc_info.value.status_code == 400


class TestSymbolWeights:
    """symbolWeights validation: every index 0..size-1 is required."""

    def test_none_means_not_supplied(self):
        assert validate_symbol_weights(None, 6) is None

    def test_string_keys_from_json(self):
        raw = {"0": 1, "1": 2, "2": 3}
        assert validate_symbol_weights(raw, 3) == (1.0, 2.0, 3.0)

    def test_int_keys_and_any_order(self):
        raw = {2: 3, 0: 1, 1: 2}
        assert validate_symbol_weights(raw, 3) == (1.0, 2.0, 3.0)

    def test_partial_map_rejected(self):
        """No silent default of 1 for missing indices."""
        with pytest.raises(InvalidWeightsError, match="'2'"):
            validate_symbol_weights({"0": 1, "1": 1}, 3)

    @pytest.mark.parametrize("key", ["3", "-1", "01", "a", 3])
    def test_out_of_range_or_malformed_key_rejected(self, key):
        raw = {"0": 1, "1": 1, "2": 1, key: 1}
        with pytest.raises(InvalidWeightsError):
            validate_symbol_weights(raw, 3)

    def test_duplicate_index_rejected(self):
        raw = {"0": 1, 0: 1, "1": 1, "2": 1}
        with pytest.raises(InvalidWeightsError, match="duplicate"):
            validate_symbol_weights(raw, 3)

    def test_bool_key_rejected(self):
        with pytest.raises(InvalidWeightsError):
            validate_symbol_weights({True: 1, "0": 1, "2": 1}, 3)

    @pytest.mark.parametrize("value", [0, -0.5, float("nan"), float("inf"), 10**400, False, "2"])
    def test_bad_value_rejected(self, value):
        raw = {"0": 1, "1": value, "2": 1}
        with pytest.raises(InvalidWeightsError, match="'1'"):
            validate_symbol_weights(raw, 3)
