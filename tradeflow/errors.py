"""Exceptions raised by the workflow store and snapshot loader."""


class WorkflowError(Exception):
    """Base exception for workflow graph operations."""


class NodeNotFoundError(WorkflowError, KeyError):
    """Raised when a node id does not resolve to a node in the workflow."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")

    def __str__(self) -> str:
        return self.args[0]


class DuplicateNodeError(WorkflowError):
    """Raised when a node id is already in use, or was used earlier in the session."""

    def __init__(self, node_id: str, retired: bool = False):
        self.node_id = node_id
        self.retired = retired
        reason = "was already used in this session" if retired else "already exists"
        super().__init__(f"Node id '{node_id}' {reason}")


class SnapshotError(WorkflowError):
    """Raised when a workflow document cannot be parsed or validated."""
