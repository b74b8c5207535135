"""
Alert data: models, seed set and the in-memory repository.
"""

from .repository import AlertRepository
from .seed import seed_alerts

__all__ = ["AlertRepository", "seed_alerts"]
