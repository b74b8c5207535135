"""
Configuration for the Sentinel triage console
"""

from .config import (
    AnalysisConfig,
    ConfigValidationError,
    FeedConfig,
    MetricsConfig,
    SentinelConfig,
    SessionConfig,
    TrackingConfig,
    DEFAULT_BUCKETS,
    GROQ_BASE_URL,
)

__all__ = [
    "AnalysisConfig",
    "ConfigValidationError",
    "FeedConfig",
    "MetricsConfig",
    "SentinelConfig",
    "SessionConfig",
    "TrackingConfig",
    "DEFAULT_BUCKETS",
    "GROQ_BASE_URL",
]
