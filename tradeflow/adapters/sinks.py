"""Event sinks for engine notifications."""

import logging
from pathlib import Path
from typing import Protocol

import httpx

from tradeflow.models.engine_event import EngineEvent

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    """Protocol for receiving engine events."""

    def append(self, event: EngineEvent) -> None:
        """Append an event to the sink."""
        ...


class ListSink:
    """Stores events in a list, optionally keeping only the newest ``max_events``."""

    def __init__(self, max_events: int | None = None) -> None:
        self.events: list[EngineEvent] = []
        self.max_events = max_events

    def append(self, event: EngineEvent) -> None:
        """Append an event to the list."""
        self.events.append(event)
        if self.max_events is not None and len(self.events) > self.max_events:
            del self.events[: len(self.events) - self.max_events]

    def clear(self) -> None:
        """Clear all events."""
        self.events.clear()


class FileSink:
    """Writes events to a JSONL file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, event: EngineEvent) -> None:
        """Append an event to the file."""
        with open(self.path, "a") as f:
            f.write(event.model_dump_json() + "\n")


class HttpSink:
    """Posts events to a collector endpoint.

    Network failures are logged and dropped; a notification outage must not
    abort a tick.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def append(self, event: EngineEvent) -> None:
        payload = {"events": [event.model_dump(mode="json")]}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("failed to deliver event %s to %s: %s", event.event_id, self.url, exc)


class FanOutSink:
    """Forwards every event to several sinks."""

    def __init__(self, *sinks: EventSink) -> None:
        self.sinks = list(sinks)

    def append(self, event: EngineEvent) -> None:
        for sink in self.sinks:
            sink.append(event)
