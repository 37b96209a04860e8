"""Integration tests: feeds driving the engine, sinks and summaries."""

import json
import time

import httpx
import pytest

from tradeflow.adapters.event_api import EventEmitter
from tradeflow.adapters.sinks import FanOutSink, FileSink, HttpSink, ListSink
from tradeflow.analysis.workflow_summary import event_summary, workflow_summary
from tradeflow.config import load_settings
from tradeflow.engine.runner import EngineRunner, TradingEngine
from tradeflow.feeds import FeedExhausted, RandomWalkPriceFeed, ScriptedPriceFeed
from tradeflow.models.engine_event import EngineEvent, EventType
from tradeflow.snapshot import dump_snapshot, loads_snapshot
from tradeflow.workflow import Workflow


@pytest.fixture
def workflow(make_trigger, make_action) -> Workflow:
    workflow = Workflow()
    workflow.add_node(make_trigger("cross", condition="crosses_above", threshold=100.0))
    workflow.add_node(make_trigger("level", asset="BTC", condition="below", threshold=50.0))
    workflow.add_node(make_action("long"))
    workflow.add_node(make_action("short", position="short"))
    workflow.add_edge("cross", "long")
    workflow.add_edge("level", "short")
    return workflow


class TestTradingEngine:
    def test_run_tick_evaluates_then_dispatches(self, workflow, emitter, sink):
        engine = TradingEngine(workflow, emitter)

        result = engine.run_tick({"SOL": 105.0, "BTC": 40.0})

        assert result.tick == 1
        assert result.fired_trigger_ids == {"cross", "level"}
        assert sorted(result.executed_action_ids) == ["long", "short"]
        assert engine.last_result is result
        assert sink.events[-1].event_type == EventType.tick
        assert sink.events[-1].payload == {
            "tick": 1,
            "price_count": 2,
            "fired_count": 2,
            "executed_count": 2,
        }

    def test_dispatch_uses_the_firing_price(self, workflow):
        engine = TradingEngine(workflow)
        engine.run_tick({"SOL": 105.0, "BTC": 40.0})
        assert workflow.get("long").runtime_state.last_trigger_price == 105.0
        assert workflow.get("short").runtime_state.last_trigger_price == 40.0


class TestEngineRunner:
    def test_scripted_run(self, workflow, emitter, sink):
        feed = ScriptedPriceFeed(
            [
                {"SOL": 95.0, "BTC": 60.0},
                {"SOL": 105.0},  # cross fires; BTC missing this tick
                {"SOL": 110.0, "BTC": 45.0},  # level fires
                {"SOL": 99.0, "BTC": 44.0},  # level holds
            ]
        )
        runner = EngineRunner(TradingEngine(workflow, emitter), feed, interval=0)

        results = runner.run_ticks(10)

        assert len(results) == 4
        assert [sorted(r.fired_trigger_ids) for r in results] == [[], ["cross"], ["level"], ["level"]]
        summary = event_summary(sink.events)
        assert summary.fires_by_trigger == {"cross": 1, "level": 2}
        assert summary.executions_by_action == {"long": 1, "short": 2}
        assert summary.last_tick == 4
        assert summary.errors == []

    def test_background_loop_stops_when_feed_runs_dry(self, workflow, emitter, sink):
        feed = ScriptedPriceFeed([{"SOL": 95.0}, {"SOL": 105.0}])
        runner = EngineRunner(TradingEngine(workflow, emitter), feed, interval=0.01)

        assert runner.start() is True
        deadline = time.monotonic() + 5
        while runner.is_running and time.monotonic() < deadline:
            time.sleep(0.01)

        assert runner.is_running is False
        assert runner.engine.tick_count == 2
        types = [e.event_type for e in sink.events]
        assert types[0] == EventType.engine_started
        assert types[-1] == EventType.engine_stopped
        assert sink.events[-1].payload == {"reason": "feed_exhausted", "ticks": 2}

    def test_stop_between_ticks(self, workflow, emitter, sink):
        feed = RandomWalkPriceFeed(["SOL", "BTC"], seed=7)
        runner = EngineRunner(TradingEngine(workflow, emitter), feed, interval=0.01)

        runner.start()
        assert runner.start() is False  # already running
        time.sleep(0.05)
        assert runner.stop(timeout=5) is True

        ticks = [e for e in sink.events if e.event_type == EventType.tick]
        # every started tick completed and was reported
        assert len(ticks) == runner.engine.tick_count
        assert sink.events[-1].event_type == EventType.engine_stopped
        assert sink.events[-1].payload["reason"] == "stopped"

    def test_feed_failure_is_reported_and_skipped(self, workflow, emitter, sink):
        class FlakyFeed:
            def __init__(self):
                self.calls = 0

            def next_tick(self):
                self.calls += 1
                if self.calls == 1:
                    raise ConnectionError("feed down")
                if self.calls > 2:
                    raise FeedExhausted()
                return {"SOL": 150.0}

        runner = EngineRunner(TradingEngine(workflow, emitter), FlakyFeed(), interval=0.01)
        runner.start()
        deadline = time.monotonic() + 5
        while runner.is_running and time.monotonic() < deadline:
            time.sleep(0.01)

        errors = [e for e in sink.events if e.event_type == EventType.error]
        assert [e.payload["error_type"] for e in errors] == ["feed"]
        assert runner.engine.tick_count == 1


class TestFeeds:
    def test_random_walk_is_bounded_and_seeded(self):
        a = RandomWalkPriceFeed(["sol", "BTC"], step=10.0, seed=42)
        b = RandomWalkPriceFeed(["SOL", "BTC"], step=10.0, seed=42)
        previous = None
        for _ in range(50):
            tick = a.next_tick()
            assert tick == b.next_tick()
            assert set(tick) == {"SOL", "BTC"}
            assert all(price >= 0 for price in tick.values())
            if previous:
                for symbol, price in tick.items():
                    assert abs(price - previous[symbol]) <= 5.0
            previous = tick

    def test_random_walk_initial_prices(self):
        feed = RandomWalkPriceFeed(["SOL"], step=0.0, initial_prices={"SOL": 123.0})
        assert feed.next_tick() == {"SOL": 123.0}

    def test_random_walk_never_negative(self):
        feed = RandomWalkPriceFeed(["DOGE"], step=100.0, initial_prices={"DOGE": 0.1}, seed=1)
        for _ in range(20):
            assert feed.next_tick()["DOGE"] >= 0.0

    def test_scripted_feed_exhausts(self):
        feed = ScriptedPriceFeed([{"SOL": 1.0}])
        assert feed.remaining == 1
        assert feed.next_tick() == {"SOL": 1.0}
        with pytest.raises(FeedExhausted):
            feed.next_tick()


class TestSinks:
    def test_file_sink_writes_jsonl(self, tmp_path, workflow):
        path = tmp_path / "events" / "run.jsonl"
        memory = ListSink()
        emitter = EventEmitter("run-1", FanOutSink(memory, FileSink(path)))

        TradingEngine(workflow, emitter).run_tick({"SOL": 105.0})

        lines = path.read_text().splitlines()
        assert len(lines) == len(memory.events)
        restored = [EngineEvent.model_validate_json(line) for line in lines]
        assert restored == memory.events
        assert [e.sequence for e in restored] == list(range(len(restored)))

    def test_list_sink_keeps_newest(self):
        sink = ListSink(max_events=2)
        emitter = EventEmitter("run", sink)
        for tick in range(5):
            emitter.emit_tick(tick, 0, 0, 0)
        assert [e.payload["tick"] for e in sink.events] == [3, 4]

    def test_http_sink_posts_events(self):
        received = []

        def handler(request):
            received.append(json.loads(request.content))
            return httpx.Response(200)

        sink = HttpSink("http://collector.test/events", transport=httpx.MockTransport(handler))
        EventEmitter("run-1", sink).emit(EventType.engine_started)

        assert len(received) == 1
        assert received[0]["events"][0]["event_type"] == "engine_started"

    def test_http_sink_swallows_collector_errors(self):
        sink = HttpSink(
            "http://collector.test/events",
            transport=httpx.MockTransport(lambda request: httpx.Response(503)),
        )
        EventEmitter("run-1", sink).emit(EventType.engine_started)

    def test_emitter_sequence_and_run_id(self):
        sink = ListSink()
        emitter = EventEmitter("run-xyz", sink)
        emitter.emit(EventType.engine_started)
        emitter.emit_error("feed", "timeout")
        assert [e.sequence for e in sink.events] == [0, 1]
        assert {e.run_id for e in sink.events} == {"run-xyz"}


class TestSnapshotResume:
    def test_crossing_resumes_after_round_trip(self, workflow):
        """Saving and reloading mid-run gives the same next-tick decisions."""
        engine = TradingEngine(workflow)
        engine.run_tick({"SOL": 95.0, "BTC": 60.0})

        restored = loads_snapshot(dump_snapshot(workflow))

        next_prices = {"SOL": 105.0, "BTC": 55.0}
        original = TradingEngine(workflow).run_tick(next_prices, now="t")
        reloaded = TradingEngine(restored).run_tick(next_prices, now="t")
        assert original.fired_trigger_ids == reloaded.fired_trigger_ids == {"cross"}
        assert restored.snapshot() == workflow.snapshot()


class TestSummaries:
    def test_workflow_summary(self, workflow, make_trigger):
        workflow.add_node(make_trigger("lonely", asset="ETH"))
        TradingEngine(workflow).run_tick({"SOL": 105.0, "BTC": 60.0})

        summary = workflow_summary(workflow)

        assert summary.trigger_count == 3
        assert summary.action_count == 2
        assert summary.edge_count == 2
        assert summary.fired_trigger_ids == ["cross"]
        assert summary.executed_action_ids == ["long"]
        assert summary.unwired_trigger_ids == ["lonely"]
        assert summary.dangling_edges == []

    def test_event_summary_empty(self):
        assert event_summary([]).event_count == 0


class TestSettings:
    def test_defaults(self, monkeypatch, tmp_path):
        for name in ("TRADEFLOW_TICK_INTERVAL", "TRADEFLOW_SYMBOLS", "TRADEFLOW_EVENT_LOG"):
            monkeypatch.delenv(name, raising=False)
        settings = load_settings(tmp_path / "missing.env")
        assert settings.tick_interval == 3.0
        assert "SOL" in settings.symbols
        assert settings.event_log is None

    def test_from_env_file(self, monkeypatch, tmp_path):
        monkeypatch.delenv("TRADEFLOW_TICK_INTERVAL", raising=False)
        monkeypatch.delenv("TRADEFLOW_SYMBOLS", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("TRADEFLOW_TICK_INTERVAL=0.5\nTRADEFLOW_SYMBOLS=sol, btc\n")
        settings = load_settings(env_file)
        assert settings.tick_interval == 0.5
        assert settings.symbols == ["SOL", "BTC"]

    def test_rejects_bad_interval(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TRADEFLOW_TICK_INTERVAL", "0")
        with pytest.raises(ValueError):
            load_settings(tmp_path / "missing.env")
