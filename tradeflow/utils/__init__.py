"""Utility functions for tradeflow."""

from tradeflow.utils.identifiers import (
    generate_event_id,
    generate_node_id,
    generate_run_id,
    utc_timestamp,
)

__all__ = [
    "generate_event_id",
    "generate_node_id",
    "generate_run_id",
    "utc_timestamp",
]
