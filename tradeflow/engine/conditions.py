"""Condition evaluation for price triggers."""

from tradeflow.models.nodes import TriggerCondition


def evaluate_condition(
    previous_price: float | None,
    current_price: float,
    condition: TriggerCondition | str,
    threshold: float,
) -> bool:
    """Decide whether a trigger fires for this tick.

    Level conditions (``above``/``below``) look at the current price only and
    hold on every tick the level holds. Crossing conditions need the previous
    tick on the other side of the threshold; a trigger that has never seen a
    price counts its previous price as 0.

    Args:
        previous_price: price observed on the trigger's previous tick, or None
        current_price: price delivered this tick
        condition: condition kind
        threshold: trigger level

    Raises:
        ValueError: if the condition kind is not supported.
    """
    condition = TriggerCondition(condition)
    previous = 0.0 if previous_price is None else previous_price

    if condition == TriggerCondition.above:
        return current_price > threshold
    if condition == TriggerCondition.below:
        return current_price < threshold
    if condition == TriggerCondition.crosses_above:
        return previous <= threshold and current_price > threshold
    if condition == TriggerCondition.crosses_below:
        return previous >= threshold and current_price < threshold
    raise ValueError(f"Unsupported trigger condition: {condition}")
