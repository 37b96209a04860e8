"""Shared node builders for the engine tests."""

import pytest

from tradeflow.adapters.event_api import EventEmitter
from tradeflow.adapters.sinks import ListSink
from tradeflow.models.nodes import (
    ActionConfig,
    ActionNode,
    TriggerConfig,
    TriggerNode,
    TriggerState,
)


def build_trigger(
    node_id: str = "t1",
    asset: str = "SOL",
    condition: str = "crosses_above",
    threshold: float = 100.0,
    last_observed_price: float | None = None,
) -> TriggerNode:
    return TriggerNode(
        id=node_id,
        label=f"{asset} {condition} {threshold}",
        config=TriggerConfig(asset=asset, condition=condition, threshold=threshold),
        runtime_state=TriggerState(last_observed_price=last_observed_price),
    )


def build_action(
    node_id: str = "a1",
    position: str = "long",
    amount_usd: float = 100.0,
    leverage: int = 10,
) -> ActionNode:
    return ActionNode(
        id=node_id,
        label=f"Open {position} {node_id}",
        config=ActionConfig(
            exchange="binance",
            pair="SOLUSDT",
            position=position,
            amount_usd=amount_usd,
            leverage=leverage,
        ),
    )


@pytest.fixture
def sink() -> ListSink:
    return ListSink()


@pytest.fixture
def emitter(sink: ListSink) -> EventEmitter:
    return EventEmitter("test-run", sink)


@pytest.fixture
def make_trigger():
    return build_trigger


@pytest.fixture
def make_action():
    return build_action
