"""
In-memory alert repository.

Holds the working set of alerts in insertion order. It is the only owner of
alert state; other components read through it and mutate via its methods.
"""

from typing import Dict, Iterable, List, Optional
from uuid import uuid4
from loguru import logger

from .models.alert import (
    Alert, AlertSignals, AlertStatus, FraudCategory, TimelineEvent, risk_level_for_score,
)
from .models.transaction import TransactionEvent


class AlertRepository:
    """
    Working set of alerts.

    Features:
    - Insertion-ordered listing (the queue order)
    - Status and score mutation with the score/level invariant kept
    - Promotion of flagged feed transactions into new alerts
    """

    def __init__(self, alerts: Optional[Iterable[Alert]] = None):
        self._alerts: Dict[str, Alert] = {}
        for alert in alerts or []:
            self.add(alert)

    def __len__(self) -> int:
        return len(self._alerts)

    def __contains__(self, alert_id: str) -> bool:
        return alert_id in self._alerts

    def add(self, alert: Alert) -> Alert:
        """Add an alert; ids must be unique."""
        if alert.alert_id in self._alerts:
            raise ValueError(f"Duplicate alert id: {alert.alert_id}")
        risk_level_for_score(alert.risk_score)
        self._alerts[alert.alert_id] = alert
        logger.debug(f"Added alert {alert.alert_id} ({alert.risk_level.value}, score {alert.risk_score})")
        return alert

    def get(self, alert_id: str) -> Optional[Alert]:
        return self._alerts.get(alert_id)

    def list(self) -> List[Alert]:
        """All alerts in insertion order."""
        return list(self._alerts.values())

    def update_status(self, alert_id: str, status: AlertStatus) -> Alert:
        alert = self._require(alert_id)
        previous = alert.status
        alert.status = AlertStatus(status)
        logger.info(f"Alert {alert_id} status {previous.value} -> {alert.status.value}")
        return alert

    def update_score(self, alert_id: str, risk_score: float) -> Alert:
        """Rescore an alert; its risk level follows the new score."""
        risk_level_for_score(risk_score)
        alert = self._require(alert_id)
        alert.risk_score = risk_score
        return alert

    def ingest_transaction(self, event: TransactionEvent) -> Optional[Alert]:
        """Promote a flagged feed transaction into a new MONITORING alert."""
        if not event.is_flagged:
            return None
        alert = Alert(
            alert_id=f"ALT-{uuid4().hex[:6].upper()}",
            user_id=f"USR-{event.txn_id}",
            username=f"feed_{event.txn_id.lower()}",
            risk_score=event.risk_score,
            category=FraudCategory.UNKNOWN,
            status=AlertStatus.MONITORING,
            created_ts=event.timestamp,
            origin_explanation=(
                f"Real-time feed flagged a {event.txn_type} of {event.amount:,.2f} {event.currency} "
                f"with risk score {event.risk_score}."
            ),
            signals=AlertSignals(),
            timeline=[
                TimelineEvent(
                    event_id=f"ev-{event.txn_id}",
                    timestamp=event.timestamp.isoformat(),
                    event_type=event.txn_type,
                    description=f"{event.txn_type.title()} of {event.amount:,.2f} {event.currency}",
                    importance="HIGH",
                )
            ],
        )
        logger.info(f"Promoted flagged transaction {event.txn_id} to alert {alert.alert_id}")
        return self.add(alert)

    def _require(self, alert_id: str) -> Alert:
        alert = self._alerts.get(alert_id)
        if alert is None:
            raise KeyError(f"Unknown alert: {alert_id}")
        return alert
