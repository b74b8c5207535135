"""
Investigation analysis: reasoning-service client, prompts, failure taxonomy
and the synthetic fallback.
"""

from .client import AnalysisClient, AnalysisResponse, AnalysisService, classify_exception
from .errors import (
    AnalysisError,
    AnalysisErrorKind,
    AnalysisFailure,
    MalformedResponseError,
    RateLimitedError,
    ServiceError,
)
from .fallback import synthesize_analysis
from .prompts import SYSTEM_INSTRUCTIONS, build_analysis_prompt

__all__ = [
    "AnalysisClient",
    "AnalysisResponse",
    "AnalysisService",
    "classify_exception",
    "AnalysisError",
    "AnalysisErrorKind",
    "AnalysisFailure",
    "MalformedResponseError",
    "RateLimitedError",
    "ServiceError",
    "synthesize_analysis",
    "SYSTEM_INSTRUCTIONS",
    "build_analysis_prompt",
]
