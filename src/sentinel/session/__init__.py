"""
Per-alert investigation session
"""

from .investigation import (
    InvestigationSession,
    PlaybackState,
    RequestToken,
    SessionState,
    SessionStateError,
)

__all__ = [
    "InvestigationSession",
    "PlaybackState",
    "RequestToken",
    "SessionState",
    "SessionStateError",
]
