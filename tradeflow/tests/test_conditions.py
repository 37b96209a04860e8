"""Tests for the condition evaluator."""

import pytest

from tradeflow.engine.conditions import evaluate_condition
from tradeflow.models.nodes import TriggerCondition

THRESHOLD = 100.0


class TestLevelConditions:
    """above/below depend on the current price only."""

    @pytest.mark.parametrize("previous", [None, 0.0, 50.0, 100.0, 150.0])
    def test_above_ignores_history(self, previous):
        assert evaluate_condition(previous, 101.0, "above", THRESHOLD) is True
        assert evaluate_condition(previous, 100.0, "above", THRESHOLD) is False
        assert evaluate_condition(previous, 99.0, "above", THRESHOLD) is False

    @pytest.mark.parametrize("previous", [None, 0.0, 50.0, 100.0, 150.0])
    def test_below_ignores_history(self, previous):
        assert evaluate_condition(previous, 99.0, "below", THRESHOLD) is True
        assert evaluate_condition(previous, 100.0, "below", THRESHOLD) is False
        assert evaluate_condition(previous, 101.0, "below", THRESHOLD) is False

    def test_above_holds_on_consecutive_ticks(self):
        """A held level keeps firing; there is no debounce."""
        prices = [120.0, 121.0, 119.0, 130.0]
        previous = None
        results = []
        for price in prices:
            results.append(evaluate_condition(previous, price, TriggerCondition.above, THRESHOLD))
            previous = price
        assert results == [True, True, True, True]


class TestCrossingConditions:
    """crosses_above/crosses_below need the previous tick on the other side."""

    @pytest.mark.parametrize(
        "previous,current,expected",
        [
            (95.0, 105.0, True),
            (100.0, 105.0, True),  # at the threshold counts as below
            (101.0, 105.0, False),  # both above
            (90.0, 100.0, False),  # at-or-below both times
            (90.0, 95.0, False),
            (105.0, 95.0, False),
        ],
    )
    def test_crosses_above(self, previous, current, expected):
        assert evaluate_condition(previous, current, "crosses_above", THRESHOLD) is expected

    @pytest.mark.parametrize(
        "previous,current,expected",
        [
            (105.0, 95.0, True),
            (100.0, 95.0, True),  # at the threshold counts as above
            (99.0, 95.0, False),  # both below
            (110.0, 100.0, False),
            (95.0, 105.0, False),
        ],
    )
    def test_crosses_below(self, previous, current, expected):
        assert evaluate_condition(previous, current, "crosses_below", THRESHOLD) is expected

    def test_missing_previous_counts_as_zero(self):
        """A trigger that has never seen a price treats its previous price as 0."""
        assert evaluate_condition(None, 105.0, "crosses_above", THRESHOLD) is True
        assert evaluate_condition(None, 95.0, "crosses_above", THRESHOLD) is False
        # 0 is never at or above a positive threshold
        assert evaluate_condition(None, 95.0, "crosses_below", THRESHOLD) is False

    def test_crossing_fires_only_on_the_crossing_tick(self):
        prices = [95.0, 105.0, 110.0, 108.0, 99.0, 101.0]
        previous = 90.0
        results = []
        for price in prices:
            results.append(evaluate_condition(previous, price, "crosses_above", THRESHOLD))
            previous = price
        assert results == [False, True, False, False, False, True]


class TestEvaluatorContract:
    def test_idempotent(self):
        """Same inputs, same answer, every time."""
        args = (95.0, 105.0, TriggerCondition.crosses_above, THRESHOLD)
        assert evaluate_condition(*args) == evaluate_condition(*args)
        assert args == (95.0, 105.0, TriggerCondition.crosses_above, THRESHOLD)

    def test_accepts_enum_or_string(self):
        assert evaluate_condition(None, 150.0, TriggerCondition.above, THRESHOLD) == evaluate_condition(
            None, 150.0, "above", THRESHOLD
        )

    def test_unknown_condition_rejected(self):
        with pytest.raises(ValueError):
            evaluate_condition(None, 150.0, "equals", THRESHOLD)
