"""
Sentinel - Alert triage and investigation core for financial-fraud alerts.

Holds the analyst's working set of scored alerts, filters and prioritises the
triage queue, keeps the live risk-distribution and throughput metrics, and
drives per-alert investigation analysis against an LLM reasoning service with
retry and synthetic fallback.
"""

__version__ = "0.1.0"
