"""Tick orchestration and the background engine loop.

``TradingEngine.run_tick`` is one full tick: evaluate triggers, then
dispatch their actions, all under the workflow lock so the editor never
sees half a tick. ``EngineRunner`` pulls prices from a feed on a fixed
interval and drives ticks until stopped; a stop request is honoured
between ticks, never in the middle of one.
"""

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field

from tradeflow.adapters.event_api import EventEmitter
from tradeflow.config import DEFAULT_TICK_INTERVAL
from tradeflow.engine.dispatch import dispatch
from tradeflow.engine.evaluation import evaluate_tick
from tradeflow.feeds import FeedExhausted, PriceFeed
from tradeflow.models.engine_event import EventType
from tradeflow.utils.identifiers import utc_timestamp
from tradeflow.workflow import Workflow

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """Outcome of one tick."""

    tick: int
    timestamp: str
    prices: dict[str, float]
    fired_trigger_ids: set[str] = field(default_factory=set)
    executed_action_ids: list[str] = field(default_factory=list)


class TradingEngine:
    """Runs ticks against a workflow and reports through an emitter."""

    def __init__(self, workflow: Workflow, emitter: EventEmitter | None = None) -> None:
        self.workflow = workflow
        self.emitter = emitter
        self.tick_count = 0
        self.last_result: TickResult | None = None

    def run_tick(self, prices: Mapping[str, float], now: str | None = None) -> TickResult:
        """Evaluate all triggers against ``prices`` and dispatch what fired."""
        now = now or utc_timestamp()
        prices = dict(prices)

        def firing_price(trigger_id: str) -> float:
            return prices[self.workflow.require(trigger_id).config.asset]

        with self.workflow.lock:
            self.tick_count += 1
            fired = evaluate_tick(self.workflow, prices, emitter=self.emitter, now=now)
            executed = dispatch(
                self.workflow, fired, firing_price, emitter=self.emitter, now=now
            )
            result = TickResult(
                tick=self.tick_count,
                timestamp=now,
                prices=prices,
                fired_trigger_ids=fired,
                executed_action_ids=executed,
            )
            self.last_result = result

        if self.emitter:
            self.emitter.emit_tick(
                result.tick, len(prices), len(fired), len(executed), timestamp=now
            )
        return result


class EngineRunner:
    """Drives a TradingEngine from a price feed on a background thread.

    Usage:
        runner = EngineRunner(engine, RandomWalkPriceFeed(["SOL", "BTC"]), interval=3.0)
        runner.start()
        ...
        runner.stop()

    For scripted, synchronous runs use ``run_ticks``.
    """

    def __init__(
        self,
        engine: TradingEngine,
        feed: PriceFeed,
        interval: float = DEFAULT_TICK_INTERVAL,
    ) -> None:
        self.engine = engine
        self.feed = feed
        self.interval = interval
        self._stop_requested = threading.Event()
        self._thread: threading.Thread | None = None
        self._control_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Start ticking in the background. Returns False if already running."""
        with self._control_lock:
            if self.is_running:
                return False
            self._stop_requested.clear()
            self._thread = threading.Thread(
                target=self._run, name="tradeflow-engine", daemon=True
            )
            self._emit(EventType.engine_started, {"interval": self.interval})
            logger.info("engine started (interval %.1fs)", self.interval)
            self._thread.start()
            return True

    def stop(self, timeout: float | None = None) -> bool:
        """Ask the loop to stop and wait for the in-flight tick to finish.

        Returns:
            True if the loop is no longer running.
        """
        with self._control_lock:
            self._stop_requested.set()
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        return not self.is_running

    def run_ticks(self, count: int) -> list[TickResult]:
        """Run up to ``count`` ticks synchronously, stopping early if the feed runs dry."""
        results = []
        for _ in range(count):
            try:
                prices = self.feed.next_tick()
            except FeedExhausted:
                logger.info("price feed exhausted after %d ticks", self.engine.tick_count)
                break
            results.append(self.engine.run_tick(prices))
        return results

    def _run(self) -> None:
        reason = "stopped"
        try:
            while not self._stop_requested.is_set():
                if not self._step():
                    reason = "feed_exhausted"
                    break
                self._stop_requested.wait(self.interval)
        finally:
            logger.info("engine stopped (%s) after %d ticks", reason, self.engine.tick_count)
            self._emit(EventType.engine_stopped, {"reason": reason, "ticks": self.engine.tick_count})

    def _step(self) -> bool:
        """Run one tick from the feed. Returns False once the feed is exhausted."""
        try:
            prices = self.feed.next_tick()
        except FeedExhausted:
            return False
        except Exception as exc:
            # feed gap: skip this tick and poll again on the next one
            logger.exception("price feed failed")
            if self.engine.emitter:
                self.engine.emitter.emit_error("feed", str(exc))
            return True

        try:
            self.engine.run_tick(prices)
        except Exception:
            logger.exception("tick %d failed", self.engine.tick_count)
        return True

    def _emit(self, event_type: EventType, payload: dict) -> None:
        if self.engine.emitter:
            self.engine.emitter.emit(event_type, payload=payload)
