"""Core data models for tradeflow."""

from tradeflow.models.nodes import (
    CROSSING_CONDITIONS,
    LEVEL_CONDITIONS,
    MAX_LEVERAGE,
    ActionConfig,
    ActionKind,
    ActionNode,
    ActionState,
    Edge,
    Node,
    NodePosition,
    PositionSide,
    TriggerCondition,
    TriggerConfig,
    TriggerNode,
    TriggerState,
    WorkflowSnapshot,
)
from tradeflow.models.engine_event import EngineEvent, EventType
from tradeflow.models.execution_record import ExecutionRecord

__all__ = [
    # Workflow graph
    "ActionConfig",
    "ActionKind",
    "ActionNode",
    "ActionState",
    "CROSSING_CONDITIONS",
    "Edge",
    "LEVEL_CONDITIONS",
    "MAX_LEVERAGE",
    "Node",
    "NodePosition",
    "PositionSide",
    "TriggerCondition",
    "TriggerConfig",
    "TriggerNode",
    "TriggerState",
    "WorkflowSnapshot",
    # Events
    "EngineEvent",
    "EventType",
    "ExecutionRecord",
]
