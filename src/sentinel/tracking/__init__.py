"""
Tracking module for analysis request monitoring
"""

from .mlflow_tracker import MLflowTracker, build_tracker

__all__ = ["MLflowTracker", "build_tracker"]
