"""TradeFlow - trigger/action workflow engine for simulated crypto trading."""

from tradeflow.models import (
    ActionConfig,
    ActionKind,
    ActionNode,
    Edge,
    EngineEvent,
    EventType,
    ExecutionRecord,
    PositionSide,
    TriggerCondition,
    TriggerConfig,
    TriggerNode,
    WorkflowSnapshot,
)
from tradeflow.workflow import Workflow
from tradeflow.engine import (
    EngineRunner,
    TradingEngine,
    dispatch,
    evaluate_condition,
    evaluate_tick,
)
from tradeflow.feeds import RandomWalkPriceFeed, ScriptedPriceFeed
from tradeflow.snapshot import load_snapshot, loads_snapshot, save_snapshot

__all__ = [
    # Models
    "ActionConfig",
    "ActionKind",
    "ActionNode",
    "Edge",
    "PositionSide",
    "TriggerCondition",
    "TriggerConfig",
    "TriggerNode",
    "WorkflowSnapshot",
    # Events
    "EngineEvent",
    "EventType",
    "ExecutionRecord",
    # Graph store
    "Workflow",
    # Engine
    "evaluate_condition",
    "evaluate_tick",
    "dispatch",
    "TradingEngine",
    "EngineRunner",
    # Feeds
    "RandomWalkPriceFeed",
    "ScriptedPriceFeed",
    # Snapshots
    "load_snapshot",
    "loads_snapshot",
    "save_snapshot",
]
