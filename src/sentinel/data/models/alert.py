"""
Alert model for the triage queue.
Alerts are scored fraud-risk cases tied to one user, with an ordered timeline.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any
from enum import Enum


class RiskLevel(str, Enum):
    """Discrete risk level, aligned with the histogram score ranges."""
    CRITICAL = "CRITICAL"   # 81-100
    HIGH = "HIGH"           # 61-80
    MEDIUM = "MEDIUM"       # 41-60
    LOW = "LOW"             # 0-40


class FraudCategory(str, Enum):
    """Fraud typology tag attached to an alert."""
    LAUNDERING = "Money Laundering"
    ACCOUNT_TAKEOVER = "Account Takeover"
    SYNTHETIC_IDENTITY = "Synthetic Identity"
    COLLUSIVE_TRADING = "Collusive Trading"
    STRUCTURING = "Structuring / Smurfing"
    UNKNOWN = "Unknown Anomaly"

    @classmethod
    def parse(cls, value: Any) -> "FraudCategory":
        """Accept a member, its name or its display value."""
        if isinstance(value, cls):
            return value
        text = str(value)
        if text in cls.__members__:
            return cls[text]
        return cls(text)


class AlertStatus(str, Enum):
    """Alert triage status."""
    MONITORING = "MONITORING"
    FLAGGED = "FLAGGED"
    BLOCKED = "BLOCKED"
    RESOLVED_SUSPICIOUS = "RESOLVED_SUSPICIOUS"
    RESOLVED_BENIGN = "RESOLVED_BENIGN"

    @property
    def is_resolved(self) -> bool:
        return self in RESOLVED_STATUSES


RESOLVED_STATUSES = frozenset({AlertStatus.RESOLVED_SUSPICIOUS, AlertStatus.RESOLVED_BENIGN})

# Lower bound (inclusive) of each level
RISK_LEVEL_THRESHOLDS = [
    (81, RiskLevel.CRITICAL),
    (61, RiskLevel.HIGH),
    (41, RiskLevel.MEDIUM),
    (0, RiskLevel.LOW),
]


def risk_level_for_score(score: float) -> RiskLevel:
    """Map a 0-100 risk score onto its risk level."""
    if score < 0 or score > 100:
        raise ValueError(f"Risk score must lie in [0, 100], got {score}")
    for lower_bound, level in RISK_LEVEL_THRESHOLDS:
        if score >= lower_bound:
            return level
    return RiskLevel.LOW


@dataclass(frozen=True)
class TimelineEvent:
    """Immutable event in an alert's timeline."""
    event_id: str
    timestamp: str
    event_type: str                     # LOGIN, DEPOSIT, TRADE, WITHDRAWAL, ...
    description: str
    importance: str = "MEDIUM"          # CRITICAL, HIGH, MEDIUM, LOW
    metadata: Optional[Dict[str, Any]] = None

    def render(self) -> str:
        return f"[{self.timestamp}] {self.event_type}: {self.description} (Importance: {self.importance})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.event_id,
            "timestamp": self.timestamp,
            "type": self.event_type,
            "description": self.description,
            "importance": self.importance,
        }


@dataclass
class AlertSignals:
    """ML sub-scores, each in [0, 1]."""
    behavioral_score: float = 0.0
    temporal_score: float = 0.0
    network_score: float = 0.0

    def __post_init__(self):
        for name in ("behavioral_score", "temporal_score", "network_score"):
            value = getattr(self, name)
            if value < 0.0 or value > 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {value}")


@dataclass
class Alert:
    """Represents a fraud-risk alert in the triage queue."""

    alert_id: str
    user_id: str
    username: str
    risk_score: float                   # 0-100
    category: FraudCategory
    status: AlertStatus = AlertStatus.MONITORING
    origin_explanation: str = ""
    signals: AlertSignals = field(default_factory=AlertSignals)
    created_ts: datetime = field(default_factory=datetime.now)
    timeline: List[TimelineEvent] = field(default_factory=list)

    def __post_init__(self):
        risk_level_for_score(self.risk_score)

    @property
    def risk_level(self) -> RiskLevel:
        """Derived from risk_score; never stored independently."""
        return risk_level_for_score(self.risk_score)

    @property
    def is_resolved(self) -> bool:
        return self.status in RESOLVED_STATUSES

    @property
    def is_critical(self) -> bool:
        return self.risk_level == RiskLevel.CRITICAL

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.alert_id,
            "userId": self.user_id,
            "username": self.username,
            "riskScore": self.risk_score,
            "riskLevel": self.risk_level.value,
            "category": self.category.value,
            "timestamp": self.created_ts.isoformat() if self.created_ts else None,
            "status": self.status.value,
            "originExplanation": self.origin_explanation,
            "signals": {
                "behavioralScore": self.signals.behavioral_score,
                "temporalScore": self.signals.temporal_score,
                "networkScore": self.signals.network_score,
            },
            "timeline": [event.to_dict() for event in self.timeline],
        }
