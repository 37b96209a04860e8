"""Workflow graph models: trigger and action nodes, edges and snapshots.

A workflow is a set of nodes wired by directed edges. Trigger nodes watch a
price condition, action nodes describe the trade to take when a connected
trigger fires. Configuration is immutable once a node is built; only the
engine writes ``runtime_state``, and it does so by producing a new node
(copy-on-write) rather than mutating the old one.

JSON uses camelCase keys (``runtimeState``, ``amountUsd``) so documents
exported by the canvas load as-is; snake_case is accepted on input too.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class FlowModel(BaseModel):
    """base model with camelCase aliases."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

    def to_json_dict(self) -> dict:
        """Dump to plain JSON-compatible data with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class TriggerCondition(str, Enum):
    """Price conditions a trigger can watch."""

    above = "above"  # level
    below = "below"  # level
    crosses_above = "crosses_above"  # crossing
    crosses_below = "crosses_below"  # crossing


LEVEL_CONDITIONS = {TriggerCondition.above, TriggerCondition.below}
CROSSING_CONDITIONS = {TriggerCondition.crosses_above, TriggerCondition.crosses_below}


class PositionSide(str, Enum):
    """Direction of the position an action opens."""

    long = "long"
    short = "short"


class ActionKind(str, Enum):
    """Action palette entries offered by the editor."""

    long_position = "long_position"
    short_position = "short_position"
    close_position = "close_position"
    place_order = "place_order"
    stop_loss = "stop_loss"
    take_profit = "take_profit"


MAX_LEVERAGE = 125


class TriggerConfig(FlowModel):
    """What a trigger watches: an asset, a condition and a threshold."""

    model_config = {"extra": "forbid"}

    asset: str = Field(min_length=1)
    condition: TriggerCondition
    threshold: float = Field(gt=0, strict=True, allow_inf_nan=False)

    @field_validator("asset")
    @classmethod
    def normalize_asset(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("asset must not be blank")
        return value


class ActionConfig(FlowModel):
    """The (simulated) trade an action node places when dispatched."""

    model_config = {"extra": "forbid"}

    exchange: str = Field(min_length=1)
    pair: str = Field(min_length=1)  # e.g. "SOLUSDT"
    position: PositionSide
    amount_usd: float = Field(gt=0, strict=True, allow_inf_nan=False)
    leverage: int = Field(ge=1, le=MAX_LEVERAGE, strict=True)

    @field_validator("exchange")
    @classmethod
    def normalize_exchange(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("exchange must not be blank")
        return value

    @field_validator("pair")
    @classmethod
    def normalize_pair(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("pair must not be blank")
        return value


class TriggerState(FlowModel):
    """Engine-owned state of a trigger node."""

    last_observed_price: float | None = None
    fired: bool = False
    fired_at: str | None = None


class ActionState(FlowModel):
    """Engine-owned state of an action node."""

    last_executed_at: str | None = None
    last_trigger_price: float | None = None


class NodePosition(FlowModel):
    """canvas coordinates, owned by the editor."""

    x: float
    y: float


class TriggerNode(FlowModel):
    """a node that fires when its price condition holds."""

    id: str = Field(min_length=1)
    category: Literal["trigger"] = "trigger"
    label: str = ""
    description: str | None = None
    config: TriggerConfig
    runtime_state: TriggerState = Field(default_factory=TriggerState)
    position: NodePosition | None = None


class ActionNode(FlowModel):
    """a node executed when a connected trigger fires."""

    id: str = Field(min_length=1)
    category: Literal["action"] = "action"
    kind: ActionKind = ActionKind.long_position
    label: str = ""
    description: str | None = None
    config: ActionConfig
    runtime_state: ActionState = Field(default_factory=ActionState)
    position: NodePosition | None = None


Node = Annotated[TriggerNode | ActionNode, Field(discriminator="category")]


class Edge(FlowModel):
    """a directed wire from a trigger to an action."""

    source: str
    target: str


class WorkflowSnapshot(FlowModel):
    """The exported document: every node (with runtime state) and every edge."""

    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
