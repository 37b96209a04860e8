"""Event emission API used by the engine."""

import logging
import threading

from tradeflow.adapters.sinks import EventSink
from tradeflow.models.engine_event import EngineEvent, EventType
from tradeflow.models.execution_record import ExecutionRecord
from tradeflow.models.nodes import TriggerNode
from tradeflow.utils.identifiers import generate_event_id, utc_timestamp

logger = logging.getLogger(__name__)


class EventEmitter:
    """Stamps events with ids, timestamps and a run-wide sequence and hands them to a sink."""

    def __init__(self, run_id: str, event_sink: EventSink) -> None:
        self.run_id = run_id
        self.event_sink = event_sink
        self._sequence = 0
        self._lock = threading.Lock()

    def _next_sequence(self) -> int:
        """Get the next sequence number."""
        with self._lock:
            seq = self._sequence
            self._sequence += 1
            return seq

    def _build(
        self,
        event_type: EventType,
        node_id: str | None,
        payload: dict | None,
        timestamp: str | None,
    ) -> EngineEvent:
        return EngineEvent(
            event_id=generate_event_id(),
            run_id=self.run_id,
            timestamp=timestamp or utc_timestamp(),
            sequence=self._next_sequence(),
            event_type=event_type,
            node_id=node_id,
            payload=payload or {},
        )

    def emit(
        self,
        event_type: EventType,
        node_id: str | None = None,
        payload: dict | None = None,
        timestamp: str | None = None,
    ) -> EngineEvent:
        """Emit an engine event with the given parameters.

        A sink failure never reaches the caller: it is logged and reported
        as a ``sink`` error event, best-effort.
        """
        event = self._build(event_type, node_id, payload, timestamp)
        try:
            self.event_sink.append(event)
        except Exception as exc:
            logger.exception("event sink rejected %s event %s", event.event_type.value, event.event_id)
            self._report_sink_failure(event, exc)
        return event

    def _report_sink_failure(self, failed: EngineEvent, exc: Exception) -> None:
        payload = {
            "error_type": "sink",
            "message": str(exc),
            "details": {"event_id": failed.event_id, "event_type": failed.event_type.value},
        }
        report = self._build(EventType.error, failed.node_id, payload, None)
        try:
            self.event_sink.append(report)
        except Exception:
            logger.warning("could not report sink failure for event %s", failed.event_id)

    def emit_trigger_fired(self, node: TriggerNode, price: float, timestamp: str) -> EngineEvent:
        """Emit a trigger_fired event for a node that just fired at ``price``."""
        payload = {
            "asset": node.config.asset,
            "condition": node.config.condition.value,
            "threshold": node.config.threshold,
            "price_at_fire": price,
        }
        return self.emit(EventType.trigger_fired, node.id, payload=payload, timestamp=timestamp)

    def emit_action_executed(self, record: ExecutionRecord) -> EngineEvent:
        """Emit an action_executed event carrying the execution record."""
        payload = {
            "trigger_id": record.trigger_id,
            "config": record.config.to_json_dict(),
            "trigger_price": record.trigger_price,
        }
        return self.emit(
            EventType.action_executed,
            record.action_id,
            payload=payload,
            timestamp=record.executed_at,
        )

    def emit_tick(
        self,
        tick: int,
        price_count: int,
        fired_count: int,
        executed_count: int,
        timestamp: str | None = None,
    ) -> EngineEvent:
        """Emit a tick summary event."""
        payload = {
            "tick": tick,
            "price_count": price_count,
            "fired_count": fired_count,
            "executed_count": executed_count,
        }
        return self.emit(EventType.tick, payload=payload, timestamp=timestamp)

    def emit_error(
        self,
        error_type: str,
        message: str,
        node_id: str | None = None,
        details: dict | None = None,
    ) -> EngineEvent:
        """Emit an error event."""
        payload: dict = {"error_type": error_type, "message": message}
        if details:
            payload["details"] = details
        return self.emit(EventType.error, node_id, payload=payload)
