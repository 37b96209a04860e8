"""API routes for editing the workflow graph."""

import random

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from tradeflow.catalog import (
    ACTION_PALETTE,
    ASSETS,
    EXCHANGES,
    TRIGGER_PALETTE,
    default_action_config,
    default_trigger_config,
    is_known_exchange,
)
from tradeflow.errors import DuplicateNodeError, NodeNotFoundError, SnapshotError
from tradeflow.models.nodes import (
    ActionConfig,
    ActionKind,
    ActionNode,
    Edge,
    NodePosition,
    TriggerCondition,
    TriggerConfig,
    TriggerNode,
)
from tradeflow.snapshot import parse_snapshot
from tradeflow.utils.identifiers import generate_node_id
from server.runtime import get_runtime

router = APIRouter()

# canvas columns for new nodes
TRIGGER_COLUMN_X = 100.0
ACTION_COLUMN_X = 450.0
ROW_HEIGHT = 120.0


class CreateTriggerRequest(BaseModel):
    """request body for adding a trigger node."""

    config: TriggerConfig
    label: str | None = None
    description: str | None = None
    position: NodePosition | None = None


class CreateActionRequest(BaseModel):
    """request body for adding an action node."""

    config: ActionConfig
    kind: ActionKind = ActionKind.long_position
    label: str | None = None
    description: str | None = None
    position: NodePosition | None = None


def _default_position(column_x: float, node_count: int) -> NodePosition:
    return NodePosition(x=column_x + random.random() * 50, y=100 + node_count * ROW_HEIGHT)


def _add_node(node: TriggerNode | ActionNode) -> dict:
    try:
        get_runtime().workflow.add_node(node)
    except DuplicateNodeError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return node.to_json_dict()


@router.get("/catalog")
def get_catalog() -> dict:
    """assets, exchanges, conditions and palette entries for the editor forms."""
    return {
        "assets": [{"symbol": a.symbol, "name": a.name} for a in ASSETS],
        "exchanges": [{"id": e.id, "name": e.name} for e in EXCHANGES],
        "conditions": [c.value for c in TriggerCondition],
        "triggers": [
            {"id": t.id, "title": t.title, "description": t.description} for t in TRIGGER_PALETTE
        ],
        "actions": [
            {"id": a.id, "title": a.title, "description": a.description}
            for a in ACTION_PALETTE.values()
        ],
        "defaults": {
            "trigger": default_trigger_config().to_json_dict(),
            "action": default_action_config().to_json_dict(),
        },
    }


@router.get("/workflow")
def export_workflow() -> dict:
    """export the workflow document (nodes with runtime state, and edges)."""
    return get_runtime().workflow.snapshot().to_json_dict()


@router.put("/workflow")
def load_workflow(document: dict) -> dict:
    """replace the workflow with an exported document."""
    try:
        snapshot = parse_snapshot(document)
        get_runtime().workflow.load(snapshot)
    except SnapshotError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except DuplicateNodeError as exc:
        raise HTTPException(status_code=400, detail=f"invalid workflow document: {exc}")
    return get_runtime().workflow.snapshot().to_json_dict()


@router.delete("/workflow")
def clear_workflow() -> dict:
    """clear the canvas and stop the engine."""
    runtime = get_runtime()
    runtime.runner.stop()
    runtime.workflow.clear()
    return {"cleared": True, "running": runtime.runner.is_running}


@router.post("/nodes/triggers", status_code=201)
def create_trigger(request: CreateTriggerRequest) -> dict:
    """add a price trigger node."""
    palette = TRIGGER_PALETTE[0]
    node_id = generate_node_id(palette.id)
    workflow = get_runtime().workflow
    node = TriggerNode(
        id=node_id,
        label=request.label or f"{palette.title} {node_id[-4:]}",
        description=request.description or palette.description,
        config=request.config,
        position=request.position or _default_position(TRIGGER_COLUMN_X, len(workflow)),
    )
    return _add_node(node)


@router.post("/nodes/actions", status_code=201)
def create_action(request: CreateActionRequest) -> dict:
    """add an action node."""
    if not is_known_exchange(request.config.exchange):
        raise HTTPException(
            status_code=400, detail=f"Unsupported exchange: {request.config.exchange}"
        )
    palette = ACTION_PALETTE[request.kind]
    node_id = generate_node_id(palette.id)
    workflow = get_runtime().workflow
    node = ActionNode(
        id=node_id,
        kind=request.kind,
        label=request.label or f"{palette.title} {node_id[-4:]}",
        description=request.description or palette.description,
        config=request.config,
        position=request.position or _default_position(ACTION_COLUMN_X, len(workflow)),
    )
    return _add_node(node)


@router.get("/nodes/{node_id}")
def get_node(node_id: str) -> dict:
    """get a single node with its runtime state."""
    node = get_runtime().workflow.get(node_id)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Node not found: {node_id}")
    return node.to_json_dict()


@router.delete("/nodes/{node_id}")
def delete_node(node_id: str) -> dict:
    """delete a node and its edges."""
    try:
        get_runtime().workflow.remove_node(node_id)
    except NodeNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return {"deleted": node_id}


@router.post("/edges", status_code=201)
def create_edge(edge: Edge) -> dict:
    """connect a trigger to an action."""
    try:
        created = get_runtime().workflow.add_edge(edge.source, edge.target)
    except NodeNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return created.to_json_dict()


@router.delete("/edges")
def delete_edge(source: str, target: str) -> dict:
    """remove the edge between two nodes."""
    if not get_runtime().workflow.remove_edge(source, target):
        raise HTTPException(status_code=404, detail=f"Edge not found: {source} -> {target}")
    return {"deleted": {"source": source, "target": target}}
