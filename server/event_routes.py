"""API routes for the engine event log."""

from fastapi import APIRouter, Query

from tradeflow.models.engine_event import EventType
from server.runtime import get_runtime

router = APIRouter()


@router.get("/events")
def list_events(
    limit: int | None = Query(default=None, ge=0),
    offset: int = Query(default=0, ge=0),
    event_type: EventType | None = None,
) -> list[dict]:
    """get logged events, oldest first."""
    events = list(get_runtime().events.events)
    if event_type is not None:
        events = [e for e in events if e.event_type == event_type]
    events = events[offset:]
    if limit is not None:
        events = events[:limit]
    return [event.model_dump(mode="json") for event in events]


@router.delete("/events")
def clear_events() -> dict:
    """clear the in-memory event log."""
    events = get_runtime().events
    cleared = len(events.events)
    events.clear()
    return {"cleared": cleared}
