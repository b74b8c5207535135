"""
Real-time metrics aggregator.

Maintains the risk-score histogram and the throughput series shown on the
overview panel. Counts are a noisy visualisation aid, not an audit count:
every transaction bumps its bucket and randomly decays the others, and a
periodic tick adds ambient jitter.
"""

import asyncio
import random
from dataclasses import dataclass, field
from typing import List, Optional, Protocol
from loguru import logger

from ..config.config import MetricsConfig


class RandomSource(Protocol):
    """Subset of `random.Random` used by the simulation."""

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def choice(self, seq): ...


@dataclass
class HistogramBucket:
    """One risk-score range of the histogram."""
    label: str
    min_score: int
    max_score: int
    count: int
    color: str

    def contains(self, score: float) -> bool:
        return self.min_score <= score <= self.max_score


@dataclass
class MetricsState:
    buckets: List[HistogramBucket] = field(default_factory=list)
    throughput: List[float] = field(default_factory=list)

    def distribution(self) -> List[dict]:
        return [
            {"bucket": b.label, "count": b.count, "color": b.color}
            for b in self.buckets
        ]


class MetricsAggregator:
    """
    Owner of the process-wide metrics state.

    Two update paths:
    - on_transaction(risk_score): event driven, from the transaction feed
    - tick(): periodic jitter, driven by run_ticks()
    """

    def __init__(self, config: Optional[MetricsConfig] = None, rng: Optional[RandomSource] = None):
        self.config = config or MetricsConfig()
        self.rng = rng or random.Random()
        self.state = self._initial_state()
        self.transactions_seen = 0

    def _initial_state(self) -> MetricsState:
        buckets = [
            HistogramBucket(label=label, min_score=low, max_score=high, count=count, color=color)
            for label, low, high, count, color in self.config.buckets
        ]
        seed_low, seed_high = self.config.throughput_seed_range
        throughput = [
            self.rng.uniform(seed_low, seed_high)
            for _ in range(self.config.throughput_window)
        ]
        return MetricsState(buckets=buckets, throughput=throughput)

    def reset(self) -> None:
        self.state = self._initial_state()
        self.transactions_seen = 0

    def on_transaction(self, risk_score: float) -> None:
        """Fold one scored transaction into throughput and histogram."""
        self._advance_throughput()
        self._update_histogram(risk_score)
        self.transactions_seen += 1

    def _advance_throughput(self) -> None:
        cfg = self.config
        series = self.state.throughput
        step = self.rng.uniform(-cfg.throughput_step, cfg.throughput_step)
        next_value = min(cfg.throughput_max, max(cfg.throughput_min, series[-1] + step))
        series.append(next_value)
        # Fixed window: evict from the front
        while len(series) > cfg.throughput_window:
            series.pop(0)

    def _update_histogram(self, risk_score: float) -> None:
        for bucket in self.state.buckets:
            if bucket.contains(risk_score):
                bucket.count += 1
            elif self.rng.random() < self.config.decay_probability:
                bucket.count = max(0, bucket.count - 1)
        logger.debug(f"Histogram after score {risk_score}: {[b.count for b in self.state.buckets]}")

    def tick(self) -> None:
        """Ambient jitter: each bucket moves by -1, 0 or +1."""
        for bucket in self.state.buckets:
            bucket.count = max(0, bucket.count + self.rng.randint(-1, 1))

    async def run_ticks(self, interval_seconds: Optional[float] = None) -> None:
        """Apply tick() forever at the configured interval; cancel to stop."""
        interval = interval_seconds or self.config.tick_interval_seconds
        logger.info(f"Metrics jitter loop started ({interval}s interval)")
        try:
            while True:
                await asyncio.sleep(interval)
                self.tick()
        except asyncio.CancelledError:
            logger.info("Metrics jitter loop stopped")
            raise
