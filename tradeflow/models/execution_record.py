"""Execution records handed to the notification layer on dispatch."""

from pydantic import BaseModel

from tradeflow.models.nodes import ActionConfig


class ExecutionRecord(BaseModel):
    """One dispatch of an action, caused by one fired trigger.

    No order is placed anywhere; the record is what a downstream executor
    (or the editor's toast) would act on.
    """

    model_config = {"extra": "forbid", "frozen": True}

    action_id: str
    trigger_id: str
    config: ActionConfig
    trigger_price: float
    executed_at: str
