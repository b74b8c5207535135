"""
Shared fixtures and fakes for the Sentinel test-suite.
"""

import asyncio
import os
import sys
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from sentinel.analysis.client import AnalysisResponse
from sentinel.analysis.errors import AnalysisError, AnalysisErrorKind
from sentinel.data.models.alert import Alert, AlertSignals, AlertStatus, FraudCategory, TimelineEvent
from sentinel.data.models.analysis import AnalysisResult
from sentinel.data.seed import seed_alerts


def make_alert(
    alert_id: str,
    risk_score: float = 50,
    status: AlertStatus = AlertStatus.FLAGGED,
    category: FraudCategory = FraudCategory.LAUNDERING,
    username: str = "test_user",
    origin_explanation: str = "Test alert",
) -> Alert:
    return Alert(
        alert_id=alert_id,
        user_id=f"USR-{alert_id}",
        username=username,
        risk_score=risk_score,
        category=category,
        status=status,
        origin_explanation=origin_explanation,
        signals=AlertSignals(behavioral_score=0.5, temporal_score=0.5, network_score=0.5),
        timeline=[TimelineEvent("ev-1", "2023-11-20T10:00:00Z", "LOGIN", "Login", "LOW")],
    )


def make_result(alert_id: str, urgency: str = "High") -> AnalysisResult:
    return AnalysisResult(
        reasoning=f"Live analysis of {alert_id}",
        behavioral_deviation="Deviation",
        fraud_alignment="Alignment",
        evidence=["e1", "e2"],
        benign_explanations="None",
        urgency=urgency,
        next_steps="Review",
        sar_draft=f"SAR narrative for {alert_id}",
    )


class FakeAnalysisService:
    """Analysis service with scripted outcomes and optional per-alert gates"""

    def __init__(
        self,
        errors: Optional[Dict[str, List[AnalysisError]]] = None,
        gates: Optional[Dict[str, asyncio.Event]] = None,
    ):
        self.errors = errors or {}
        self.gates = gates or {}
        self.calls: List[str] = []

    async def request_analysis(self, alert: Alert) -> AnalysisResponse:
        self.calls.append(alert.alert_id)
        gate = self.gates.get(alert.alert_id)
        if gate is not None:
            await gate.wait()
        queued = self.errors.get(alert.alert_id)
        if queued:
            return AnalysisResponse(alert_id=alert.alert_id, error=queued.pop(0))
        return AnalysisResponse(alert_id=alert.alert_id, result=make_result(alert.alert_id))


RATE_LIMITED = AnalysisError(kind=AnalysisErrorKind.RATE_LIMITED, message="Error code: 429")
SERVICE_DOWN = AnalysisError(kind=AnalysisErrorKind.SERVICE_ERROR, message="Connection reset")


class FakeCompletions:
    def __init__(self, content: Optional[str] = None, exc: Optional[BaseException] = None, delay: float = 0):
        self.content = content
        self.exc = exc
        self.delay = delay
        self.calls: List[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))],
            usage=SimpleNamespace(prompt_tokens=10, completion_tokens=20, total_tokens=30),
        )


class FakeChatClient:
    """Mimics the `client.chat.completions.create` surface of AsyncOpenAI"""

    def __init__(self, **kwargs):
        self.completions = FakeCompletions(**kwargs)
        self.chat = SimpleNamespace(completions=self.completions)


class ScriptedRandom:
    """Deterministic random source returning queued values"""

    def __init__(self, randoms=None, uniforms=None, randints=None):
        self.randoms = list(randoms or [])
        self.uniforms = list(uniforms or [])
        self.randints = list(randints or [])

    def random(self) -> float:
        return self.randoms.pop(0) if self.randoms else 0.99

    def uniform(self, a: float, b: float) -> float:
        return self.uniforms.pop(0) if self.uniforms else (a + b) / 2

    def randint(self, a: int, b: int) -> int:
        return self.randints.pop(0) if self.randints else a

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def alerts():
    return seed_alerts()


@pytest.fixture
def fake_service():
    return FakeAnalysisService()
