"""
Synthetic transaction feed.

Stands in for real ingestion: emits one randomly scored transaction per
interval, keeps a short history for the feed panel and notifies listeners
(the metrics aggregator, optionally the alert repository).
"""

import asyncio
import random
import string
from datetime import datetime
from typing import AsyncIterator, Callable, List, Optional

from loguru import logger

from ..config.config import FeedConfig
from ..data.models.transaction import TransactionEvent, TRANSACTION_TYPES, CURRENCIES
from ..metrics.aggregator import RandomSource


TransactionListener = Callable[[TransactionEvent], None]

_ID_ALPHABET = string.ascii_uppercase + string.digits


class TransactionFeed:
    """Generator of scored transactions with a bounded recent history."""

    def __init__(self, config: Optional[FeedConfig] = None, rng: Optional[RandomSource] = None):
        self.config = config or FeedConfig()
        self.rng = rng or random.Random()
        self.recent: List[TransactionEvent] = []
        self._listeners: List[TransactionListener] = []
        self.total_emitted = 0
        self.total_flagged = 0

    def subscribe(self, listener: TransactionListener) -> None:
        self._listeners.append(listener)

    def generate(self) -> TransactionEvent:
        """Build one random transaction (does not publish it)."""
        risk_score = self.rng.randint(0, 100)
        return TransactionEvent(
            txn_id="".join(self.rng.choice(_ID_ALPHABET) for _ in range(9)),
            txn_type=self.rng.choice(TRANSACTION_TYPES),
            amount=round(self.rng.uniform(0, 5000), 2),
            currency=self.rng.choice(CURRENCIES),
            timestamp=datetime.now(),
            risk_score=risk_score,
            is_flagged=risk_score > self.config.flag_threshold,
        )

    def emit(self) -> TransactionEvent:
        """Generate, record and publish one transaction."""
        event = self.generate()
        self.recent.insert(0, event)
        del self.recent[self.config.history_size:]
        self.total_emitted += 1
        if event.is_flagged:
            self.total_flagged += 1
            logger.debug(f"Flagged transaction {event.txn_id} (score {event.risk_score})")
        for listener in self._listeners:
            listener(event)
        return event

    async def stream_transactions(self, *, delay_seconds: Optional[float] = None) -> AsyncIterator[TransactionEvent]:
        delay = delay_seconds if delay_seconds is not None else self.config.interval_seconds
        while True:
            await asyncio.sleep(delay)
            yield self.emit()

    async def run(self, *, limit: Optional[int] = None, delay_seconds: Optional[float] = None) -> int:
        """Publish transactions until cancelled or `limit` is reached."""
        count = 0
        async for _ in self.stream_transactions(delay_seconds=delay_seconds):
            count += 1
            if limit is not None and count >= limit:
                break
        return count
