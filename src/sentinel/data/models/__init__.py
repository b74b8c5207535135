"""
Data models for the triage console.

This package contains pure data classes only.
Repository and generation logic live elsewhere in 'sentinel.data'.
"""

from .alert import (
    Alert, AlertSignals, AlertStatus, FraudCategory, RiskLevel, TimelineEvent,
    RESOLVED_STATUSES, risk_level_for_score,
)
from .analysis import AnalysisResult, NetworkAnalysis, NetworkSignal, SYNTHETIC_TAG
from .transaction import TransactionEvent, TRANSACTION_TYPES, CURRENCIES

__all__ = [
    # Alerts
    "Alert",
    "AlertSignals",
    "AlertStatus",
    "FraudCategory",
    "RiskLevel",
    "TimelineEvent",
    "RESOLVED_STATUSES",
    "risk_level_for_score",
    # Analysis
    "AnalysisResult",
    "NetworkAnalysis",
    "NetworkSignal",
    "SYNTHETIC_TAG",
    # Transactions
    "TransactionEvent",
    "TRANSACTION_TYPES",
    "CURRENCIES",
]
