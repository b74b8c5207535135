"""
Tests for the triage console application state.
"""

import asyncio
import random

import pytest

from conftest import RATE_LIMITED, FakeAnalysisService

from sentinel.config.config import FeedConfig, SentinelConfig, SessionConfig
from sentinel.console import ConsoleView, TriageConsole
from sentinel.data.models.alert import AlertStatus, FraudCategory
from sentinel.data.models.transaction import TransactionEvent
from sentinel.session.investigation import SessionState, SessionStateError
from sentinel.triage.queue import ALL


def fast_config(**feed):
    return SentinelConfig(session=SessionConfig(fallback_delay_seconds=0.01), feed=FeedConfig(**feed))


def build_console(service=None, **feed):
    return TriageConsole(service or FakeAnalysisService(), config=fast_config(**feed), rng=random.Random(3))


class TestQueueControls:
    """Test filter and preset handling."""

    def test_default_queue_is_seed(self):
        console = build_console()
        assert [a.alert_id for a in console.visible_alerts()] == ["ALT-8821", "ALT-8822", "ALT-8823"]
        assert console.critical_count() == 1

    def test_set_filters_partial(self):
        console = build_console()
        console.set_filters(min_risk=50)
        console.set_filters(status="BLOCKED")
        assert console.criteria.min_risk == 50
        assert [a.alert_id for a in console.visible_alerts()] == ["ALT-8822"]

    def test_presets_reset_category_and_status(self):
        console = build_console()
        console.set_filters(min_risk=30, category="STRUCTURING", status="MONITORING")
        console.apply_network_preset()
        assert console.criteria.search_text == "Network"
        assert console.criteria.category == ALL
        assert console.criteria.status == ALL
        assert console.criteria.min_risk == 30
        console.apply_anomaly_preset()
        assert console.criteria.search_text == "Anomaly"


class TestSelection:
    """Test selection and investigation dispatch."""

    def test_auto_dispatch_selects_highest_open(self):
        console = build_console()

        async def scenario():
            await console.auto_dispatch()

        asyncio.run(scenario())
        assert console.selected_alert_id == "ALT-8821"
        assert console.session.state == SessionState.READY

    def test_auto_dispatch_skips_resolved(self):
        console = build_console()
        console.repository.update_status("ALT-8821", AlertStatus.RESOLVED_BENIGN)

        async def scenario():
            await console.auto_dispatch()

        asyncio.run(scenario())
        assert console.selected_alert_id == "ALT-8822"

    def test_reselect_is_noop(self):
        service = FakeAnalysisService()
        console = build_console(service)

        async def scenario():
            await console.select_alert("ALT-8822")
            return console.select_alert("ALT-8822")

        assert asyncio.run(scenario()) is None
        assert service.calls == ["ALT-8822"]

    def test_unknown_alert(self):
        console = build_console()

        async def scenario():
            console.select_alert("ALT-0000")

        with pytest.raises(KeyError):
            asyncio.run(scenario())

    def test_switching_selection_discards_stale_reply(self):
        gate = asyncio.Event()
        service = FakeAnalysisService(gates={"ALT-8821": gate})
        console = build_console(service)

        async def scenario():
            first = console.select_alert("ALT-8821")
            await asyncio.sleep(0)
            await console.select_alert("ALT-8823")
            gate.set()
            return await first

        assert asyncio.run(scenario()) is False
        assert console.session.alert.alert_id == "ALT-8823"
        assert console.session.result.reasoning == "Live analysis of ALT-8823"

    def test_deselect(self):
        console = build_console()

        async def scenario():
            await console.select_alert("ALT-8821")

        asyncio.run(scenario())
        console.deselect()
        assert console.selected_alert is None
        assert console.session.state == SessionState.IDLE


class TestEscalation:
    """Test report drafting and view changes."""

    def test_confirm_and_draft_opens_report(self):
        console = build_console()

        async def scenario():
            await console.select_alert("ALT-8821")

        asyncio.run(scenario())
        report = console.confirm_and_draft()
        assert console.view == ConsoleView.REPORT
        assert console.active_report is report
        assert report.subject["username"] == "alex_trader_42"

        console.close_report()
        assert console.view == ConsoleView.DASHBOARD
        assert console.active_report is None

    def test_confirm_requires_ready(self):
        console = build_console(FakeAnalysisService(errors={"ALT-8821": [RATE_LIMITED]}))

        async def scenario():
            await console.select_alert("ALT-8821")

        asyncio.run(scenario())
        with pytest.raises(SessionStateError):
            console.confirm_and_draft()
        assert console.view == ConsoleView.DASHBOARD

    def test_new_selection_blocks_draft_of_previous_alert(self):
        """Right after selecting B, nothing of A's result is draftable."""
        console = build_console()

        async def scenario():
            await console.select_alert("ALT-8821")
            pending = console.select_alert("ALT-8822")
            observed = (console.session.state, console.session.alert.alert_id, console.session.result)
            with pytest.raises(SessionStateError):
                console.confirm_and_draft()
            await pending
            return observed

        state, alert_id, result = asyncio.run(scenario())
        assert state == SessionState.LOADING
        assert alert_id == "ALT-8822"
        assert result is None
        assert console.active_report is None
        assert console.session.result.reasoning == "Live analysis of ALT-8822"

    def test_selection_closes_report(self):
        console = build_console()

        async def scenario():
            await console.select_alert("ALT-8821")
            console.confirm_and_draft()
            await console.select_alert("ALT-8822")

        asyncio.run(scenario())
        assert console.view == ConsoleView.DASHBOARD
        assert console.active_report is None


class TestLiveFeed:
    """Test feed wiring into metrics and the repository."""

    def test_feed_updates_metrics(self):
        console = build_console()
        console.feed.emit()
        assert console.metrics.transactions_seen == 1

    def test_flagged_transactions_not_promoted_by_default(self):
        console = build_console(flag_threshold=-1)
        console.feed.emit()
        assert len(console.repository) == 3

    def test_flagged_transactions_promoted(self):
        console = build_console(flag_threshold=-1, promote_flagged=True)
        event = console.feed.emit()
        assert len(console.repository) == 4
        promoted = console.repository.list()[-1]
        assert promoted.category == FraudCategory.UNKNOWN
        assert promoted.risk_score == event.risk_score

    def test_promoted_alert_ignores_unflagged(self):
        console = build_console(promote_flagged=True)
        console.on_transaction(TransactionEvent(
            txn_id="QWERTY123", txn_type="DEPOSIT", amount=10.0, currency="USD",
            timestamp=console.repository.list()[0].created_ts, risk_score=5, is_flagged=False,
        ))
        assert len(console.repository) == 3

    def test_start_and_stop(self):
        console = build_console(interval_seconds=0.01)

        async def scenario():
            await console.start()
            await asyncio.sleep(0.05)
            await console.stop()

        asyncio.run(scenario())
        assert console.feed.total_emitted > 0
        assert console._background == []
