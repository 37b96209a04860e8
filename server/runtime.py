"""Process-wide editor state: the workflow, its engine and the event log."""

import logging
from dataclasses import dataclass

from tradeflow.adapters.event_api import EventEmitter
from tradeflow.adapters.sinks import EventSink, FanOutSink, FileSink, HttpSink, ListSink
from tradeflow.config import EngineSettings, load_settings
from tradeflow.engine.runner import EngineRunner, TradingEngine
from tradeflow.feeds import RandomWalkPriceFeed
from tradeflow.utils.identifiers import generate_run_id
from tradeflow.workflow import Workflow

logger = logging.getLogger(__name__)


@dataclass
class EditorRuntime:
    """Everything the routes share."""

    settings: EngineSettings
    workflow: Workflow
    events: ListSink
    emitter: EventEmitter
    feed: RandomWalkPriceFeed
    engine: TradingEngine
    runner: EngineRunner


_runtime: EditorRuntime | None = None


def build_runtime(settings: EngineSettings) -> EditorRuntime:
    """Wire a fresh workflow to an engine, a simulated feed and an event log."""
    events = ListSink(max_events=settings.max_events)
    sinks: list[EventSink] = [events]
    if settings.event_log:
        sinks.append(FileSink(settings.event_log))
        logger.info("writing engine events to %s", settings.event_log)
    if settings.event_webhook:
        sinks.append(HttpSink(settings.event_webhook))
        logger.info("posting engine events to %s", settings.event_webhook)
    sink: EventSink = FanOutSink(*sinks) if len(sinks) > 1 else events

    workflow = Workflow()
    emitter = EventEmitter(generate_run_id(), sink)
    feed = RandomWalkPriceFeed(
        settings.symbols, step=settings.price_step, seed=settings.feed_seed
    )
    engine = TradingEngine(workflow, emitter)
    runner = EngineRunner(engine, feed, interval=settings.tick_interval)
    return EditorRuntime(
        settings=settings,
        workflow=workflow,
        events=events,
        emitter=emitter,
        feed=feed,
        engine=engine,
        runner=runner,
    )


def get_runtime() -> EditorRuntime:
    """Get the shared runtime, building it from the environment on first use."""
    global _runtime
    if _runtime is None:
        _runtime = build_runtime(load_settings())
    return _runtime


def reset_runtime(settings: EngineSettings | None = None) -> EditorRuntime:
    """Stop any running engine and replace the shared runtime."""
    global _runtime
    shutdown_runtime()
    _runtime = build_runtime(settings or load_settings())
    return _runtime


def shutdown_runtime() -> None:
    """Stop the engine loop, if one is running."""
    if _runtime is not None and _runtime.runner.is_running:
        _runtime.runner.stop()
