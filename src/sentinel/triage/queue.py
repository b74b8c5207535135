"""
Queue filter engine.

Pure functions over an alert sequence: filtering keeps the input order,
priority selection picks the highest-risk open alert.
"""

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Union

from ..data.models.alert import Alert, AlertStatus, FraudCategory, RiskLevel


ALL = "ALL"


@dataclass(frozen=True)
class FilterCriteria:
    """Analyst-set queue filter."""
    search_text: str = ""
    min_risk: float = 0
    category: Union[str, FraudCategory] = ALL
    status: Union[str, AlertStatus] = ALL

    def __post_init__(self):
        # Normalise category/status so comparisons are by enum member
        if self.category != ALL:
            object.__setattr__(self, "category", FraudCategory.parse(self.category))
        if self.status != ALL:
            object.__setattr__(self, "status", AlertStatus(self.status))

    def with_changes(self, **changes) -> "FilterCriteria":
        return replace(self, **changes)

    def matches(self, alert: Alert) -> bool:
        return (
            _matches_search(alert, self.search_text)
            and alert.risk_score >= self.min_risk
            and (self.category == ALL or alert.category == self.category)
            and (self.status == ALL or alert.status == self.status)
        )


# Quick presets offered on the empty investigation pane
ANOMALY_PRESET = FilterCriteria(search_text="Anomaly")
NETWORK_PRESET = FilterCriteria(search_text="Network")


def _matches_search(alert: Alert, search_text: str) -> bool:
    term = search_text.lower()
    return (
        term in alert.username.lower()
        or term in alert.alert_id.lower()
        or term in alert.origin_explanation.lower()
    )


def visible_alerts(alerts: Iterable[Alert], criteria: FilterCriteria) -> List[Alert]:
    """Alerts satisfying every predicate of `criteria`, in input order."""
    return [alert for alert in alerts if criteria.matches(alert)]


def auto_select_priority(alerts: Iterable[Alert]) -> Optional[Alert]:
    """
    Highest-risk alert that is not resolved.

    Ties go to the alert that comes first in `alerts`.
    """
    best: Optional[Alert] = None
    for alert in alerts:
        if alert.is_resolved:
            continue
        if best is None or alert.risk_score > best.risk_score:
            best = alert
    return best


def critical_count(alerts: Iterable[Alert]) -> int:
    return sum(1 for alert in alerts if alert.risk_level == RiskLevel.CRITICAL)
