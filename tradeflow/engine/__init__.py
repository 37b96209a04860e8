"""Trigger evaluation and action dispatch."""

from tradeflow.engine.conditions import evaluate_condition
from tradeflow.engine.dispatch import dispatch, execute_action
from tradeflow.engine.evaluation import evaluate_tick
from tradeflow.engine.runner import EngineRunner, TickResult, TradingEngine

__all__ = [
    "evaluate_condition",
    "evaluate_tick",
    "dispatch",
    "execute_action",
    "TradingEngine",
    "TickResult",
    "EngineRunner",
]
