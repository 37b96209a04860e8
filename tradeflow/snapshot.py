"""Save and load workflow documents.

The document is the editor's export format: ``{"nodes": [...], "edges": [...]}``
with each node's runtime state included, so a reloaded workflow resumes
crossing-condition evaluation exactly where it stopped.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from tradeflow.errors import DuplicateNodeError, SnapshotError
from tradeflow.models.nodes import WorkflowSnapshot
from tradeflow.workflow import Workflow

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_NAME = "trading-workflow.json"


def dump_snapshot(workflow: Workflow, indent: int | None = 2) -> str:
    """Serialize a workflow to the JSON document format."""
    return json.dumps(workflow.snapshot().to_json_dict(), indent=indent)


def save_snapshot(workflow: Workflow, path: Path | str) -> Path:
    """Write a workflow document to ``path`` (a directory gets the default file name)."""
    path = Path(path)
    if path.is_dir():
        path = path / DEFAULT_SNAPSHOT_NAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_snapshot(workflow))
    logger.info("saved workflow to %s", path)
    return path


def parse_snapshot(document: str | bytes | dict) -> WorkflowSnapshot:
    """Validate a workflow document without building a store.

    Raises:
        SnapshotError: if the document is not valid JSON or does not match the schema.
    """
    try:
        if isinstance(document, dict):
            return WorkflowSnapshot.model_validate(document)
        return WorkflowSnapshot.model_validate_json(document)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid workflow document: {exc}") from exc


def loads_snapshot(document: str | bytes | dict) -> Workflow:
    """Build a workflow from a document.

    The whole document is rejected on any error; nothing is partially loaded.
    """
    snapshot = parse_snapshot(document)
    try:
        return Workflow.from_snapshot(snapshot)
    except DuplicateNodeError as exc:
        raise SnapshotError(f"Invalid workflow document: {exc}") from exc


def load_snapshot(path: Path | str) -> Workflow:
    """Read a workflow document from disk."""
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as exc:
        raise SnapshotError(f"Cannot read workflow document {path}: {exc}") from exc
    workflow = loads_snapshot(text)
    logger.info("loaded workflow from %s", path)
    return workflow
