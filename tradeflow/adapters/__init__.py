"""Notification adapters: event emission and sinks."""

from tradeflow.adapters.event_api import EventEmitter
from tradeflow.adapters.sinks import EventSink, FanOutSink, FileSink, HttpSink, ListSink

__all__ = [
    "EventSink",
    "ListSink",
    "FileSink",
    "HttpSink",
    "FanOutSink",
    "EventEmitter",
]
