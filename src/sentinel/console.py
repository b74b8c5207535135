"""
Triage console application state.

Owns the alert repository, queue filter, selection, live metrics, transaction
feed and investigation session. All mutations go through its methods; there
is no module-level state.
"""

import asyncio
import random
from enum import Enum
from typing import Any, List, Optional, Set

from loguru import logger

from .analysis.client import AnalysisService
from .config.config import SentinelConfig
from .data.models.alert import Alert
from .data.models.transaction import TransactionEvent
from .data.repository import AlertRepository
from .data.seed import seed_alerts
from .metrics.aggregator import MetricsAggregator, RandomSource
from .narration.audio import AudioSink
from .narration.service import NarrationService
from .report.compositor import ReportCompositor, SARReportCompositor
from .session.investigation import InvestigationSession
from .simulation.feed import TransactionFeed
from .triage.queue import ALL, FilterCriteria, auto_select_priority, critical_count, visible_alerts


class ConsoleView(str, Enum):
    DASHBOARD = "dashboard"
    NETWORK = "network"
    REPORT = "report"


class TriageConsole:
    """Single-analyst triage console"""

    def __init__(
        self,
        analysis: AnalysisService,
        config: Optional[SentinelConfig] = None,
        repository: Optional[AlertRepository] = None,
        rng: Optional[RandomSource] = None,
        narration: Optional[NarrationService] = None,
        audio_sink: Optional[AudioSink] = None,
        compositor: Optional[ReportCompositor] = None,
    ):
        self.config = config or SentinelConfig()
        rng = rng or random.Random()

        self.repository = repository if repository is not None else AlertRepository(seed_alerts())
        self.criteria = FilterCriteria()
        self.selected_alert_id: Optional[str] = None
        self.view = ConsoleView.DASHBOARD
        self.active_report: Optional[Any] = None

        self.metrics = MetricsAggregator(self.config.metrics, rng=rng)
        self.feed = TransactionFeed(self.config.feed, rng=rng)
        self.feed.subscribe(self.on_transaction)
        self.session = InvestigationSession(
            analysis,
            config=self.config.session,
            narration=narration,
            audio_sink=audio_sink,
        )
        self.compositor = compositor or SARReportCompositor()

        self._pending: Set[asyncio.Task] = set()
        self._background: List[asyncio.Task] = []

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------

    def visible_alerts(self) -> List[Alert]:
        return visible_alerts(self.repository.list(), self.criteria)

    def set_filters(
        self,
        *,
        search_text: Optional[str] = None,
        min_risk: Optional[float] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
    ) -> FilterCriteria:
        changes = {
            "search_text": search_text,
            "min_risk": min_risk,
            "category": category,
            "status": status,
        }
        self.criteria = self.criteria.with_changes(**{k: v for k, v in changes.items() if v is not None})
        return self.criteria

    def apply_anomaly_preset(self) -> FilterCriteria:
        return self.set_filters(search_text="Anomaly", category=ALL, status=ALL)

    def apply_network_preset(self) -> FilterCriteria:
        return self.set_filters(search_text="Network", category=ALL, status=ALL)

    def critical_count(self) -> int:
        return critical_count(self.repository.list())

    # ------------------------------------------------------------------
    # Selection and investigation
    # ------------------------------------------------------------------

    @property
    def selected_alert(self) -> Optional[Alert]:
        if self.selected_alert_id is None:
            return None
        return self.repository.get(self.selected_alert_id)

    def select_alert(self, alert_id: str) -> Optional[asyncio.Task]:
        """
        Select an alert and dispatch its investigation in the background.

        Re-selecting the current alert is a no-op. Must be called from a
        running event loop.
        """
        if alert_id == self.selected_alert_id:
            return None
        alert = self.repository.get(alert_id)
        if alert is None:
            raise KeyError(f"Unknown alert: {alert_id}")

        loop = asyncio.get_running_loop()
        self.selected_alert_id = alert_id
        self.close_report()
        logger.info(f"Selected alert {alert_id}")
        token = self.session.begin_investigation(alert)
        task = loop.create_task(self.session.dispatch(token, alert))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def auto_dispatch(self) -> Optional[asyncio.Task]:
        """Select the highest-risk unresolved alert, if any."""
        priority = auto_select_priority(self.repository.list())
        if priority is None:
            logger.info("Auto-dispatch found no open alerts")
            return None
        return self.select_alert(priority.alert_id)

    def deselect(self) -> None:
        self.selected_alert_id = None
        self.close_report()
        self.session.clear()

    # ------------------------------------------------------------------
    # Escalation and views
    # ------------------------------------------------------------------

    def confirm_and_draft(self) -> Any:
        report = self.session.confirm_and_draft(self.compositor)
        self.active_report = report
        self.view = ConsoleView.REPORT
        return report

    def close_report(self) -> None:
        self.active_report = None
        if self.view == ConsoleView.REPORT:
            self.view = ConsoleView.DASHBOARD

    def set_view(self, view: ConsoleView) -> None:
        self.view = ConsoleView(view)

    # ------------------------------------------------------------------
    # Live metrics
    # ------------------------------------------------------------------

    def on_transaction(self, event: TransactionEvent) -> None:
        self.metrics.on_transaction(event.risk_score)
        if self.config.feed.promote_flagged:
            self.repository.ingest_transaction(event)

    async def start(self) -> None:
        """Start the feed and the metrics jitter loop."""
        if self._background:
            return
        loop = asyncio.get_running_loop()
        self._background = [
            loop.create_task(self.metrics.run_ticks()),
            loop.create_task(self.feed.run()),
        ]
        logger.info("Triage console background loops started")

    async def stop(self) -> None:
        for task in self._background:
            task.cancel()
        await asyncio.gather(*self._background, return_exceptions=True)
        self._background = []
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        logger.info("Triage console stopped")
