"""Action dispatch for fired triggers."""

import logging
from collections.abc import Callable, Iterable

from tradeflow.adapters.event_api import EventEmitter
from tradeflow.models.execution_record import ExecutionRecord
from tradeflow.models.nodes import ActionNode, ActionState, TriggerNode
from tradeflow.utils.identifiers import utc_timestamp
from tradeflow.workflow import Workflow

logger = logging.getLogger(__name__)


def execute_action(
    workflow: Workflow,
    action: ActionNode,
    trigger_id: str,
    trigger_price: float,
    now: str,
) -> ExecutionRecord:
    """Record one execution of ``action`` on the workflow and describe it.

    Nothing is sent to an exchange.
    """
    state = ActionState(last_executed_at=now, last_trigger_price=trigger_price)
    workflow.update_runtime_state(action.id, state)
    return ExecutionRecord(
        action_id=action.id,
        trigger_id=trigger_id,
        config=action.config,
        trigger_price=trigger_price,
        executed_at=now,
    )


def dispatch(
    workflow: Workflow,
    fired_trigger_ids: Iterable[str],
    trigger_price: Callable[[str], float],
    *,
    emitter: EventEmitter | None = None,
    now: str | None = None,
) -> list[str]:
    """Execute every action wired to a fired trigger.

    Edges that point at a missing node or at a non-action node are skipped.
    An action reached through several fired edges is executed once per edge;
    dispatch is re-entrant on purpose and does not deduplicate.

    Args:
        workflow: graph to dispatch on
        fired_trigger_ids: triggers that fired this tick
        trigger_price: resolves a fired trigger id to the price it fired at
        emitter: receives one action_executed event per execution

    Returns:
        ids of the executed actions, one entry per execution.
    """
    now = now or utc_timestamp()
    executed: list[str] = []

    with workflow.lock:
        # sorted for a stable execution order across runs
        for trigger_id in sorted(fired_trigger_ids):
            if not isinstance(workflow.get(trigger_id), TriggerNode):
                logger.warning("fired id %s is not a trigger in this workflow, skipping", trigger_id)
                continue
            edges = workflow.outgoing(trigger_id)
            if not edges:
                continue

            try:
                price = trigger_price(trigger_id)
            except Exception as exc:
                logger.exception("cannot resolve firing price for %s", trigger_id)
                if emitter:
                    emitter.emit_error("dispatch", str(exc), node_id=trigger_id)
                continue

            for edge in edges:
                target = workflow.get(edge.target)
                if target is None:
                    logger.warning("skipping edge %s -> %s: target does not exist", edge.source, edge.target)
                    continue
                if not isinstance(target, ActionNode):
                    logger.warning(
                        "skipping edge %s -> %s: target is a %s node",
                        edge.source,
                        edge.target,
                        target.category,
                    )
                    continue

                try:
                    record = execute_action(workflow, target, trigger_id, price, now)
                except Exception as exc:
                    logger.exception("failed to execute action %s", target.id)
                    if emitter:
                        emitter.emit_error(
                            "dispatch",
                            str(exc),
                            node_id=target.id,
                            details={"trigger_id": trigger_id},
                        )
                    continue

                executed.append(target.id)
                logger.info(
                    "executing %s: %s %s %sx $%.2f on %s (trigger %s at %.2f)",
                    target.id,
                    target.config.position.value,
                    target.config.pair,
                    target.config.leverage,
                    target.config.amount_usd,
                    target.config.exchange,
                    trigger_id,
                    price,
                )
                if emitter:
                    emitter.emit_action_executed(record)

    return executed
