"""
Synthetic event sources for the triage console
"""

from .feed import TransactionFeed

__all__ = ["TransactionFeed"]
