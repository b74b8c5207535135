"""
Seed working set loaded into the alert repository at start-up.
"""

from datetime import datetime, timedelta
from typing import List

from .models.alert import Alert, AlertSignals, AlertStatus, FraudCategory, TimelineEvent


def seed_alerts(now: datetime = None) -> List[Alert]:
    """Return a fresh copy of the seed alerts."""
    now = now or datetime.now()
    return [
        Alert(
            alert_id="ALT-8821",
            user_id="USR-9012",
            username="alex_trader_42",
            risk_score=92,
            category=FraudCategory.COLLUSIVE_TRADING,
            status=AlertStatus.FLAGGED,
            created_ts=now,
            origin_explanation=(
                "Identified series of high-frequency wash trades with USR-4412 over a shared IP, "
                "suggesting risk-free profit laundering."
            ),
            signals=AlertSignals(behavioral_score=0.85, temporal_score=0.94, network_score=0.88),
            timeline=[
                TimelineEvent("ev-1", "2023-11-20T10:00:00Z", "LOGIN", "Login from new device in Singapore", "MEDIUM"),
                TimelineEvent("ev-2", "2023-11-20T10:05:00Z", "DEPOSIT", "Deposit of $5,000 via Crypto Rail", "HIGH"),
                TimelineEvent("ev-3", "2023-11-20T10:12:00Z", "TRADE", "Series of 15 offsetting trades with USR-4412", "CRITICAL"),
                TimelineEvent("ev-4", "2023-11-20T10:25:00Z", "WITHDRAWAL", "Attempted withdrawal of $4,990 to external wallet", "HIGH"),
            ],
        ),
        Alert(
            alert_id="ALT-8822",
            user_id="USR-1150",
            username="merchant_ops_global",
            risk_score=78,
            category=FraudCategory.LAUNDERING,
            status=AlertStatus.BLOCKED,
            created_ts=now - timedelta(hours=1),
            origin_explanation=(
                "Sudden velocity shift: Large deposit followed by multi-hop internal transfers "
                "to high-risk legacy accounts."
            ),
            signals=AlertSignals(behavioral_score=0.72, temporal_score=0.81, network_score=0.45),
            timeline=[
                TimelineEvent("ev-5", "2023-11-20T08:00:00Z", "DEPOSIT", "Batch deposit of $12,500 across 4 payment methods", "HIGH"),
                TimelineEvent("ev-6", "2023-11-20T09:30:00Z", "TRANSFER", "Internal transfer to USR-8812 (High Risk)", "HIGH"),
            ],
        ),
        Alert(
            alert_id="ALT-8823",
            user_id="USR-4491",
            username="crypto_newbie_01",
            risk_score=45,
            category=FraudCategory.STRUCTURING,
            status=AlertStatus.MONITORING,
            created_ts=now - timedelta(hours=2),
            origin_explanation=(
                "Sequence of sub-threshold deposits over 48 hours indicates possible deliberate "
                "limit avoidance (Structuring)."
            ),
            signals=AlertSignals(behavioral_score=0.45, temporal_score=0.55, network_score=0.12),
            timeline=[
                TimelineEvent("ev-7", "2023-11-20T06:00:00Z", "DEPOSIT", "Multiple deposits of $950 ($10k limit avoidance)", "MEDIUM"),
            ],
        ),
    ]
