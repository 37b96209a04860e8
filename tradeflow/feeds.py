"""Price feed sources.

A feed produces one batch of prices per tick: a mapping from asset symbol
to price. Symbols may be missing from a batch; triggers on those assets
simply wait for the next tick.
"""

import random
from collections.abc import Iterable, Mapping
from typing import Protocol


class FeedExhausted(Exception):
    """Raised by a feed that has no more ticks to deliver."""


class PriceFeed(Protocol):
    """Protocol for tick sources."""

    def next_tick(self) -> dict[str, float]:
        """Return the prices for the next tick."""
        ...


class RandomWalkPriceFeed:
    """Simulated market: every symbol takes a bounded random step per tick.

    Prices start uniformly in ``[0, initial_max)`` unless given, move by a
    uniform step in ``[-step/2, step/2)`` and never go below zero.
    """

    def __init__(
        self,
        symbols: Iterable[str],
        step: float = 10.0,
        initial_prices: Mapping[str, float] | None = None,
        initial_max: float = 200.0,
        seed: int | None = None,
    ) -> None:
        self.symbols = [s.upper() for s in symbols]
        self.step = step
        self.initial_max = initial_max
        self._rng = random.Random(seed)
        self._prices: dict[str, float] = dict(initial_prices or {})

    @property
    def prices(self) -> dict[str, float]:
        """Latest prices delivered."""
        return dict(self._prices)

    def next_tick(self) -> dict[str, float]:
        new_prices = {}
        for symbol in self.symbols:
            current = self._prices.get(symbol)
            if current is None:
                current = self._rng.random() * self.initial_max
            change = (self._rng.random() - 0.5) * self.step
            new_prices[symbol] = max(0.0, current + change)
        self._prices.update(new_prices)
        return new_prices


class ScriptedPriceFeed:
    """Replays a fixed sequence of price batches, then raises FeedExhausted."""

    def __init__(self, ticks: Iterable[Mapping[str, float]]) -> None:
        self._ticks = [dict(t) for t in ticks]
        self._position = 0

    @property
    def remaining(self) -> int:
        return len(self._ticks) - self._position

    def next_tick(self) -> dict[str, float]:
        if self._position >= len(self._ticks):
            raise FeedExhausted(f"scripted feed finished after {len(self._ticks)} ticks")
        tick = self._ticks[self._position]
        self._position += 1
        return dict(tick)
