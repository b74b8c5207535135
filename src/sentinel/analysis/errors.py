"""
Failure taxonomy for investigation analysis requests.

Exceptions are raised inside the client and converted into an
`AnalysisError` descriptor at the boundary; callers only branch on its kind.
"""

from dataclasses import dataclass
from enum import Enum


QUOTA_MESSAGE = (
    "System throughput has exceeded current API quota limits. "
    "Live generative reasoning is temporarily unavailable."
)


class AnalysisErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    SERVICE_ERROR = "service_error"
    MALFORMED_RESPONSE = "malformed_response"


class AnalysisFailure(Exception):
    """Base class for analysis request failures"""
    kind = AnalysisErrorKind.SERVICE_ERROR

    def to_error(self) -> "AnalysisError":
        return AnalysisError(kind=self.kind, message=str(self) or "Internal Intelligence Error")


class RateLimitedError(AnalysisFailure):
    """The reasoning service is throttling requests"""
    kind = AnalysisErrorKind.RATE_LIMITED


class ServiceError(AnalysisFailure):
    """Any other request failure, including timeouts"""
    kind = AnalysisErrorKind.SERVICE_ERROR


class MalformedResponseError(ServiceError):
    """Empty, non-JSON or schema-violating response"""
    kind = AnalysisErrorKind.MALFORMED_RESPONSE


@dataclass(frozen=True)
class AnalysisError:
    """Error descriptor held by an investigation session in ERROR."""
    kind: AnalysisErrorKind
    message: str

    @property
    def is_rate_limited(self) -> bool:
        return self.kind == AnalysisErrorKind.RATE_LIMITED

    @property
    def is_recoverable(self) -> bool:
        return True

    @property
    def user_message(self) -> str:
        if self.is_rate_limited:
            return QUOTA_MESSAGE
        return f"An unexpected intelligence error occurred: {self.message}"

    @property
    def recommended_action(self) -> str:
        """'wait' when throttled, otherwise 'retry'."""
        return "wait" if self.is_rate_limited else "retry"
