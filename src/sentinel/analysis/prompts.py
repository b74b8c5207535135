"""
Prompts for the investigation analysis request.
"""

from ..data.models.alert import Alert


ANALYSIS_KEYS = [
    "reasoning",
    "behavioralDeviation",
    "fraudAlignment",
    "evidence",
    "benignExplanations",
    "urgency",
    "nextSteps",
    "sarDraft",
]

SYSTEM_INSTRUCTIONS = """
You are Sentinel AI, a world-class Financial Crime Intelligence Investigator.
Your goal is to analyze transaction data, ML anomaly scores, and network graph signals to provide high-quality investigation summaries.

REASONING FRAMEWORK:
1. Behavioral: Is this account acting differently from its historical norm? (Behavioral Deviation)
2. Temporal: Is there a suspicious sequence of events?
3. Typology: How does this align with known fraud or laundering patterns? (Fraud Alignment)
4. Network: Are there shared devices, IPs, or coordinated trades?
5. Risk: What is the final urgency?

TONE: Professional, regulator-ready, objective, evidence-based.
Avoid accusations; use phrases like "Activity is consistent with..." or "Patterns suggest possible...".

OUTPUT STRUCTURE (JSON):
{
  "reasoning": "High-level summary for the analyst.",
  "behavioralDeviation": "Detailed description of how the user's current behavior deviates from their baseline or peer group.",
  "fraudAlignment": "Analysis of how this behavior matches specific, known fraud or laundering typologies.",
  "evidence": ["Evidence 1", "Evidence 2"],
  "benignExplanations": "Logical, non-suspicious alternatives for this activity.",
  "urgency": "Immediate / High / Routine",
  "nextSteps": "Concise instruction for the human analyst.",
  "sarDraft": "A regulatory-ready draft narrative for a Suspicious Activity Report (SAR)."
}

IMPORTANT: Return ONLY a single valid JSON object. No markdown formatting, no backticks.
""".strip()


def build_analysis_prompt(alert: Alert) -> str:
    """Render the user prompt for one alert, timeline included."""
    timeline = "\n".join(event.render() for event in alert.timeline) or "(no timeline events)"
    signals = alert.signals
    return f"""Analyze the following financial alert and provide a regulator-ready investigation briefing.

Alert ID: {alert.alert_id}
User: {alert.username} (ID: {alert.user_id})
Risk Level: {alert.risk_level.value}
Risk Score (Confidence): {alert.risk_score}
Category: {alert.category.value}
Status: {alert.status.value}

ML SIGNALS:
- Behavioral Anomaly Score: {signals.behavioral_score}
- Sequence/Temporal Score: {signals.temporal_score}
- Network Linkage Score: {signals.network_score}

TIMELINE:
{timeline}

REQUIREMENT: Provide a deep analysis of behavioral deviation and alignment with known fraud typologies.
Specifically, explain the network linkage signals and how they suggest coordinated activity."""
