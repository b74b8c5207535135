"""
Live risk-distribution and throughput metrics
"""

from .aggregator import HistogramBucket, MetricsAggregator, MetricsState, RandomSource

__all__ = ["HistogramBucket", "MetricsAggregator", "MetricsState", "RandomSource"]
