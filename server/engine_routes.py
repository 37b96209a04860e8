"""API routes for running the engine."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter
from pydantic import BaseModel, Field

from tradeflow.analysis.workflow_summary import event_summary, workflow_summary
from tradeflow.engine.runner import TickResult
from server.runtime import get_runtime

router = APIRouter()


class TickRequest(BaseModel):
    """request body for a manual tick."""

    prices: dict[str, Annotated[float, Field(ge=0, allow_inf_nan=False)]]


def _tick_to_dict(result: TickResult) -> dict:
    d = asdict(result)
    d["fired_trigger_ids"] = sorted(result.fired_trigger_ids)
    return d


def _status() -> dict:
    runtime = get_runtime()
    last = runtime.engine.last_result
    return {
        "running": runtime.runner.is_running,
        "tick_count": runtime.engine.tick_count,
        "interval": runtime.runner.interval,
        "prices": runtime.feed.prices,
        "last_tick": _tick_to_dict(last) if last else None,
    }


@router.get("/engine")
def engine_status() -> dict:
    """whether the engine is running, and the last tick."""
    return _status()


@router.post("/engine/start")
def start_engine() -> dict:
    """start polling simulated prices in the background."""
    started = get_runtime().runner.start()
    return {"started": started, **_status()}


@router.post("/engine/stop")
def stop_engine() -> dict:
    """stop after the in-flight tick completes."""
    stopped = get_runtime().runner.stop()
    return {"stopped": stopped, **_status()}


@router.post("/engine/tick")
def manual_tick(request: TickRequest) -> dict:
    """run one tick with the given prices."""
    prices = {symbol.upper(): price for symbol, price in request.prices.items()}
    result = get_runtime().engine.run_tick(prices)
    return _tick_to_dict(result)


@router.get("/stats")
def get_stats() -> dict:
    """workflow counts plus totals over the event log."""
    runtime = get_runtime()
    summary = workflow_summary(runtime.workflow)
    workflow_stats = asdict(summary)
    workflow_stats["dangling_edges"] = [e.to_json_dict() for e in summary.dangling_edges]
    return {
        "workflow": workflow_stats,
        "events": asdict(event_summary(list(runtime.events.events))),
        "running": runtime.runner.is_running,
    }
