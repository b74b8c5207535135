"""
Synthetic transaction event emitted by the ingestion feed.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Any


TRANSACTION_TYPES = ["DEPOSIT", "WITHDRAWAL", "TRADE", "TRANSFER"]
CURRENCIES = ["USD", "BTC", "ETH", "EUR"]


@dataclass(frozen=True)
class TransactionEvent:
    """One scored transaction from the live feed."""
    txn_id: str
    txn_type: str
    amount: float
    currency: str
    timestamp: datetime
    risk_score: int                     # 0-100
    is_flagged: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.txn_id,
            "type": self.txn_type,
            "amount": self.amount,
            "currency": self.currency,
            "timestamp": self.timestamp.isoformat(),
            "riskScore": self.risk_score,
            "isFlagged": self.is_flagged,
        }
