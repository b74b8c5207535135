"""
Tests for SAR draft composition and the synthetic fallback analysis.
"""

from conftest import make_alert, make_result

from sentinel.analysis.fallback import synthesize_analysis
from sentinel.data.models.alert import AlertStatus, FraudCategory
from sentinel.data.models.analysis import SYNTHETIC_TAG
from sentinel.report.compositor import DEFAULT_NETWORK_SUMMARY, SARReportCompositor


class TestSyntheticFallback:
    """Test the local stand-in analysis."""

    def test_tagged_and_deterministic(self, alerts):
        first = synthesize_analysis(alerts[0])
        second = synthesize_analysis(alerts[0])
        assert first == second
        assert first.reasoning.startswith(SYNTHETIC_TAG)
        assert "alex_trader_42" in first.reasoning
        assert "Collusive Trading" in first.reasoning
        assert "0.85" in first.reasoning

    def test_urgency_by_score(self):
        assert synthesize_analysis(make_alert("ALT-1", 81)).urgency == "Immediate"
        assert synthesize_analysis(make_alert("ALT-1", 80)).urgency == "High"

    def test_network_signals(self, alerts):
        result = synthesize_analysis(alerts[1])
        assert len(result.network_analysis.signals) == 2
        assert result.evidence[0] == "Sudden velocity spike"


class TestSARReportCompositor:
    """Test SAR draft layout."""

    def test_compose_from_live_result(self, alerts):
        report = SARReportCompositor().compose(alerts[0], make_result("ALT-8821", urgency="Immediate"))
        assert report.report_id == "SAR-ALT-8821"
        assert report.narrative == "SAR narrative for ALT-8821"
        assert report.network_summary == DEFAULT_NETWORK_SUMMARY
        assert report.subject["risk_level"] == "CRITICAL"
        assert len(report.timeline) == 4
        assert not report.synthetic

    def test_compose_from_synthetic_result(self, alerts):
        alert = alerts[2]
        report = SARReportCompositor().compose(alert, synthesize_analysis(alert))
        assert report.synthetic
        assert report.network_signals[0]["type"] == "Device Correlation"
        assert report.network_summary.startswith("Synthetic graph analysis")

    def test_compose_does_not_mutate_alert(self):
        alert = make_alert("ALT-1", 70, AlertStatus.BLOCKED, FraudCategory.ACCOUNT_TAKEOVER)
        before = alert.to_dict()
        SARReportCompositor().compose(alert, make_result("ALT-1"))
        assert alert.to_dict() == before

    def test_text_and_dict(self, alerts):
        report = SARReportCompositor().compose(alerts[0], synthesize_analysis(alerts[0]))
        text = report.to_text()
        assert "SUSPICIOUS ACTIVITY REPORT DRAFT SAR-ALT-8821" in text
        assert "Device Correlation (High Priority)" in text
        assert report.to_dict()["alert_id"] == "ALT-8821"
