"""Basic statistics over a workflow and the events of a run.

Backs the editor's stats panel: how many triggers and actions are on the
canvas, which are currently fired or have executed, and what a run has
reported so far.
"""

from collections import Counter
from dataclasses import dataclass, field

from tradeflow.models.engine_event import EngineEvent, EventType
from tradeflow.models.nodes import Edge
from tradeflow.workflow import Workflow


@dataclass
class WorkflowSummary:
    """Counts and live state of a workflow."""

    trigger_count: int
    action_count: int
    edge_count: int
    fired_trigger_ids: list[str] = field(default_factory=list)
    executed_action_ids: list[str] = field(default_factory=list)
    dangling_edges: list[Edge] = field(default_factory=list)
    unwired_trigger_ids: list[str] = field(default_factory=list)


@dataclass
class EventSummary:
    """Totals over a run's events."""

    event_count: int = 0
    counts_by_type: dict[str, int] = field(default_factory=dict)
    fires_by_trigger: dict[str, int] = field(default_factory=dict)
    executions_by_action: dict[str, int] = field(default_factory=dict)
    errors: list[dict] = field(default_factory=list)
    last_tick: int | None = None


def workflow_summary(workflow: Workflow) -> WorkflowSummary:
    """Summarize the workflow as it stands now."""
    with workflow.lock:
        triggers = workflow.triggers()
        actions = workflow.actions()
        edges = workflow.edges
        wired_sources = {e.source for e in edges}
        return WorkflowSummary(
            trigger_count=len(triggers),
            action_count=len(actions),
            edge_count=len(edges),
            fired_trigger_ids=[t.id for t in triggers if t.runtime_state.fired],
            executed_action_ids=[
                a.id for a in actions if a.runtime_state.last_executed_at is not None
            ],
            dangling_edges=workflow.dangling_edges(),
            unwired_trigger_ids=[t.id for t in triggers if t.id not in wired_sources],
        )


def event_summary(events: list[EngineEvent]) -> EventSummary:
    """Count events by type, fires per trigger and executions per action.

    Args:
        events: events of one run, in emission order.
    """
    if not events:
        return EventSummary()

    by_type: Counter[str] = Counter()
    fires: Counter[str] = Counter()
    executions: Counter[str] = Counter()
    errors: list[dict] = []
    last_tick = None

    for event in events:
        by_type[event.event_type.value] += 1
        if event.event_type == EventType.trigger_fired:
            fires[event.node_id] += 1
        elif event.event_type == EventType.action_executed:
            executions[event.node_id] += 1
        elif event.event_type == EventType.error:
            errors.append(
                {
                    "node_id": event.node_id,
                    "error_type": event.payload["error_type"],
                    "message": event.payload["message"],
                    "timestamp": event.timestamp,
                }
            )
        elif event.event_type == EventType.tick:
            last_tick = event.payload.get("tick", last_tick)

    return EventSummary(
        event_count=len(events),
        counts_by_type=dict(by_type),
        fires_by_trigger=dict(fires),
        executions_by_action=dict(executions),
        errors=errors,
        last_tick=last_tick,
    )
