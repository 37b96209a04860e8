"""
Engine event models for the notification layer.

Every fired trigger, dispatched action and isolated failure is reported as
an EngineEvent, so the editor (or a log file) can follow a run without
reaching into the workflow.
"""

from enum import Enum
from typing import Any, Self

from pydantic import BaseModel, model_validator


class EventType(str, Enum):
    """Types of events emitted by the engine."""

    trigger_fired = "trigger_fired"
    action_executed = "action_executed"
    tick = "tick"
    engine_started = "engine_started"
    engine_stopped = "engine_stopped"
    error = "error"


# valid error types for error events
ERROR_TYPES = {"evaluation", "dispatch", "feed", "sink"}

# required payload keys per event type
TRIGGER_FIRED_KEYS = ("asset", "condition", "threshold", "price_at_fire")
ACTION_EXECUTED_KEYS = ("trigger_id", "config", "trigger_price")


class EngineEvent(BaseModel):
    """A structured event describing what the engine did during a run."""

    model_config = {"extra": "forbid"}

    event_id: str  # UUID for deduping
    run_id: str
    timestamp: str
    sequence: int | None = None  # monotonic ordering within a run

    event_type: EventType
    node_id: str | None = None  # trigger or action the event is about

    payload: dict[str, Any]

    @model_validator(mode="after")
    def validate_payload_invariants(self) -> Self:
        """Validate payload structure based on event_type."""
        payload = self.payload
        event_type = self.event_type

        if event_type == EventType.trigger_fired:
            self._require_node_id()
            self._require_keys(payload, TRIGGER_FIRED_KEYS)
        elif event_type == EventType.action_executed:
            self._require_node_id()
            self._require_keys(payload, ACTION_EXECUTED_KEYS)
            if not isinstance(payload["config"], dict):
                raise ValueError("action_executed config must be a dict")
        elif event_type == EventType.error:
            self._validate_error(payload)

        return self

    def _require_node_id(self) -> None:
        if not self.node_id:
            raise ValueError(f"{self.event_type.value} event must reference a node_id")

    def _require_keys(self, payload: dict, keys: tuple[str, ...]) -> None:
        for key in keys:
            if key not in payload:
                raise ValueError(f"{self.event_type.value} payload must contain '{key}'")

    def _validate_error(self, payload: dict) -> None:
        """error requires error_type and message."""
        if "error_type" not in payload:
            raise ValueError("error payload must contain 'error_type'")
        if payload["error_type"] not in ERROR_TYPES:
            raise ValueError(f"error_type must be one of {ERROR_TYPES}")
        if "message" not in payload:
            raise ValueError("error payload must contain 'message'")
