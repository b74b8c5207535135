"""
SAR report composition.

The compositor consumes a finalized (Alert, AnalysisResult) pair read-only
and lays it out as a suspicious-activity-report draft.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Protocol

from ..data.models.alert import Alert
from ..data.models.analysis import AnalysisResult


DEFAULT_NETWORK_SUMMARY = (
    "Direct network correlations and device-level associations suggest coordinated "
    "activity with multiple external actors."
)
DEFAULT_BENIGN_NOTE = (
    "No significant benign explanations identified that adequately account for the "
    "identified risk signatures."
)


@dataclass
class SARDraft:
    """Suspicious-activity-report draft document"""
    report_id: str
    alert_id: str
    generated_at: datetime
    subject: Dict[str, Any]
    narrative: str
    network_summary: str
    network_signals: List[Dict[str, str]] = field(default_factory=list)
    timeline: List[Dict[str, str]] = field(default_factory=list)
    benign_explanations: str = DEFAULT_BENIGN_NOTE
    urgency: str = ""
    synthetic: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "alert_id": self.alert_id,
            "generated_at": self.generated_at.isoformat(),
            "subject": self.subject,
            "narrative": self.narrative,
            "network_summary": self.network_summary,
            "network_signals": self.network_signals,
            "timeline": self.timeline,
            "benign_explanations": self.benign_explanations,
            "urgency": self.urgency,
            "synthetic": self.synthetic,
        }

    def to_text(self) -> str:
        lines = [
            f"SUSPICIOUS ACTIVITY REPORT DRAFT {self.report_id}",
            f"Alert: {self.alert_id}    Urgency: {self.urgency}",
            "",
            "SUBJECT",
        ]
        lines += [f"  {key}: {value}" for key, value in self.subject.items()]
        lines += ["", "NARRATIVE", f"  {self.narrative}", "", "NETWORK LINKAGE", f"  {self.network_summary}"]
        lines += [
            f"  - {sig['type']} ({sig['relevance']} Priority): {sig['detail']}"
            for sig in self.network_signals
        ]
        lines += ["", "TIMELINE"]
        lines += [
            f"  {event['timestamp']}  {event['type']:<10}  {event['description']}"
            for event in self.timeline
        ]
        lines += ["", "BENIGN EXPLANATIONS", f"  {self.benign_explanations}"]
        return "\n".join(lines)


class ReportCompositor(Protocol):

    def compose(self, alert: Alert, analysis: AnalysisResult) -> Any: ...


class SARReportCompositor:
    """Builds SARDraft documents; filing is out of scope"""

    def compose(self, alert: Alert, analysis: AnalysisResult) -> SARDraft:
        network = analysis.network_analysis
        return SARDraft(
            report_id=f"SAR-{alert.alert_id}",
            alert_id=alert.alert_id,
            generated_at=datetime.now(),
            subject={
                "username": alert.username,
                "user_id": alert.user_id,
                "category": alert.category.value,
                "risk_score": alert.risk_score,
                "risk_level": alert.risk_level.value,
                "status": alert.status.value,
            },
            narrative=analysis.sar_draft,
            network_summary=network.summary if network and network.summary else DEFAULT_NETWORK_SUMMARY,
            network_signals=[
                {"type": sig.signal_type, "detail": sig.detail, "relevance": sig.relevance}
                for sig in (network.signals if network else [])
            ],
            timeline=[
                {"timestamp": e.timestamp, "type": e.event_type, "description": e.description}
                for e in alert.timeline
            ],
            benign_explanations=analysis.benign_explanations or DEFAULT_BENIGN_NOTE,
            urgency=analysis.urgency,
            synthetic=analysis.is_synthetic,
        )
