"""ID generation and timestamp utilities."""

import uuid
from datetime import datetime, timezone


def generate_node_id(kind: str) -> str:
    """Generate a node ID prefixed with its palette kind, e.g. ``price_threshold-3f9c...``."""
    return f"{kind}-{uuid.uuid4().hex[:12]}"


def generate_run_id() -> str:
    """Generate a unique engine run ID (UUID4)."""
    return str(uuid.uuid4())


def generate_event_id() -> str:
    """Generate a unique event ID (UUID4)."""
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    """Generate an ISO8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()
