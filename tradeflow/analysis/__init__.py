"""Statistics over workflows and engine events."""

from tradeflow.analysis.workflow_summary import (
    EventSummary,
    WorkflowSummary,
    event_summary,
    workflow_summary,
)

__all__ = [
    "EventSummary",
    "WorkflowSummary",
    "event_summary",
    "workflow_summary",
]
