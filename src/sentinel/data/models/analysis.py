"""
Analysis result returned by the reasoning service.

Field aliases are the JSON keys of the wire format; attributes are snake_case.
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


SYNTHETIC_TAG = "[SYNTHETIC ANALYSIS]"


class NetworkSignal(BaseModel):
    """Single network-linkage signal"""
    model_config = ConfigDict(populate_by_name=True)

    signal_type: str = Field(alias="type", description="Signal type, e.g. Device Correlation")
    detail: str = Field(description="What was observed")
    relevance: str = Field(description="High / Medium / Low")


class NetworkAnalysis(BaseModel):
    """Network-linkage block of an analysis"""
    summary: str = Field(description="Summary of network linkage findings")
    signals: List[NetworkSignal] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    """Structured investigation briefing for one alert"""
    model_config = ConfigDict(populate_by_name=True)

    reasoning: str = Field(description="High-level summary for the analyst")
    behavioral_deviation: str = Field(alias="behavioralDeviation")
    fraud_alignment: str = Field(alias="fraudAlignment")
    evidence: List[str] = Field(description="Supporting evidence items")
    benign_explanations: str = Field(alias="benignExplanations")
    urgency: str = Field(description="Immediate / High / Routine")
    next_steps: str = Field(alias="nextSteps")
    sar_draft: str = Field(alias="sarDraft")
    network_analysis: Optional[NetworkAnalysis] = Field(default=None, alias="networkAnalysis")

    @property
    def is_synthetic(self) -> bool:
        return self.reasoning.startswith(SYNTHETIC_TAG)

    def to_wire(self) -> Dict[str, Any]:
        """Dump with the wire (camelCase) keys."""
        return self.model_dump(by_alias=True, exclude_none=True)
