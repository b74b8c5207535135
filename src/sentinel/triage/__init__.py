"""
Triage queue filtering and priority selection
"""

from .queue import (
    ALL,
    ANOMALY_PRESET,
    NETWORK_PRESET,
    FilterCriteria,
    auto_select_priority,
    critical_count,
    visible_alerts,
)

__all__ = [
    "ALL",
    "ANOMALY_PRESET",
    "NETWORK_PRESET",
    "FilterCriteria",
    "auto_select_priority",
    "critical_count",
    "visible_alerts",
]
