"""
Runtime configuration.

Settings come from environment variables, optionally loaded from a ``.env``
file in the working directory.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from tradeflow.catalog import asset_symbols

DEFAULT_TICK_INTERVAL = 3.0  # seconds between price polls
DEFAULT_PRICE_STEP = 10.0  # max swing of the simulated feed per tick
DEFAULT_MAX_EVENTS = 1000  # events kept in memory by the server


@dataclass
class EngineSettings:
    """Settings for the engine runner and the simulated price feed."""

    tick_interval: float = DEFAULT_TICK_INTERVAL
    price_step: float = DEFAULT_PRICE_STEP
    symbols: list[str] = field(default_factory=asset_symbols)
    feed_seed: int | None = None
    event_log: Path | None = None
    event_webhook: str | None = None
    max_events: int = DEFAULT_MAX_EVENTS
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def load_settings(env_file: str | Path | None = None) -> EngineSettings:
    """Build settings from the environment.

    Raises:
        ValueError: if a numeric variable cannot be parsed or is out of range.
    """
    load_dotenv(env_file)

    settings = EngineSettings()
    if interval := os.getenv("TRADEFLOW_TICK_INTERVAL"):
        settings.tick_interval = float(interval)
    if step := os.getenv("TRADEFLOW_PRICE_STEP"):
        settings.price_step = float(step)
    if symbols := os.getenv("TRADEFLOW_SYMBOLS"):
        settings.symbols = [s.upper() for s in _split(symbols)]
    if seed := os.getenv("TRADEFLOW_FEED_SEED"):
        settings.feed_seed = int(seed)
    if event_log := os.getenv("TRADEFLOW_EVENT_LOG"):
        settings.event_log = Path(event_log)
    if webhook := os.getenv("TRADEFLOW_EVENT_WEBHOOK"):
        settings.event_webhook = webhook
    if max_events := os.getenv("TRADEFLOW_MAX_EVENTS"):
        settings.max_events = int(max_events)
    if origins := os.getenv("CORS_ORIGINS"):
        settings.cors_origins = _split(origins)
    settings.log_level = os.getenv("LOG_LEVEL", settings.log_level).upper()

    if settings.tick_interval <= 0:
        raise ValueError("TRADEFLOW_TICK_INTERVAL must be positive")
    if settings.price_step < 0:
        raise ValueError("TRADEFLOW_PRICE_STEP must not be negative")
    if settings.max_events < 1:
        raise ValueError("TRADEFLOW_MAX_EVENTS must be at least 1")
    return settings
