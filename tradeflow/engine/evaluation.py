"""Per-tick trigger evaluation."""

import logging
from collections.abc import Mapping

from tradeflow.adapters.event_api import EventEmitter
from tradeflow.engine.conditions import evaluate_condition
from tradeflow.models.nodes import TriggerNode, TriggerState
from tradeflow.utils.identifiers import utc_timestamp
from tradeflow.workflow import Workflow

logger = logging.getLogger(__name__)


def _next_state(node: TriggerNode, price: float, now: str) -> tuple[bool, TriggerState]:
    state = node.runtime_state
    triggered = evaluate_condition(
        state.last_observed_price,
        price,
        node.config.condition,
        node.config.threshold,
    )
    # last_observed_price moves only after the decision, so crossings compare
    # against the previous tick
    if triggered:
        return True, TriggerState(last_observed_price=price, fired=True, fired_at=now)
    return False, state.model_copy(update={"last_observed_price": price, "fired": False})


def evaluate_tick(
    workflow: Workflow,
    prices: Mapping[str, float],
    *,
    emitter: EventEmitter | None = None,
    now: str | None = None,
) -> set[str]:
    """Evaluate every trigger once against this tick's prices.

    Triggers whose asset has no price this tick are left untouched. Every
    trigger is judged on the graph as it stood when the tick began, and a
    failure on one trigger is reported without stopping the others.

    Returns:
        ids of the triggers that fired this tick.
    """
    now = now or utc_timestamp()
    fired: set[str] = set()

    with workflow.lock:
        for node in workflow.triggers():
            price = prices.get(node.config.asset)
            if price is None:
                logger.debug("no price for %s this tick, skipping %s", node.config.asset, node.id)
                continue

            try:
                triggered, state = _next_state(node, price, now)
                workflow.update_runtime_state(node.id, state)
            except Exception as exc:
                logger.exception("failed to evaluate trigger %s", node.id)
                if emitter:
                    emitter.emit_error("evaluation", str(exc), node_id=node.id)
                continue

            if not triggered:
                continue
            fired.add(node.id)
            logger.info(
                "%s %s %s fired at %.2f (%s)",
                node.config.asset,
                node.config.condition.value,
                node.config.threshold,
                price,
                node.id,
            )
            if emitter:
                emitter.emit_trigger_fired(node, price, now)

    return fired
