"""
MLflow tracking for investigation analysis requests

Records latency, outcome, failure kind and token usage of every request made
by the analysis client. Disabled unless SENTINEL_MLFLOW_ENABLED=1.
"""

from datetime import datetime
from typing import Any, Optional

import mlflow
from loguru import logger

from ..config.config import TrackingConfig


class MLflowTracker:
    """MLflow tracker for analysis requests"""

    def __init__(self, config: Optional[TrackingConfig] = None):
        self.config = config or TrackingConfig(enabled=True)
        self.run_name_prefix = "analysis"

        if self.config.tracking_uri:
            mlflow.set_tracking_uri(self.config.tracking_uri)
            logger.info(f"MLflow tracking set to: {self.config.tracking_uri}")

        mlflow.set_experiment(self.config.experiment_name)
        logger.info(f"MLflow experiment set to: {self.config.experiment_name}")

    def log_analysis(self, response: Any, provider: str, model: str) -> None:
        """Log one AnalysisResponse as its own run"""
        run_name = f"{self.run_name_prefix}_{response.alert_id}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        with mlflow.start_run(run_name=run_name):
            mlflow.log_params({
                "alert_id": response.alert_id,
                "provider": provider,
                "model": model,
            })
            mlflow.log_metrics({
                "execution_time_ms": response.execution_time_ms,
                "success": int(response.success),
                "prompt_tokens": response.prompt_tokens,
                "completion_tokens": response.completion_tokens,
                "total_tokens": response.total_tokens,
            })
            if response.error is not None:
                mlflow.set_tags({
                    "error_kind": response.error.kind.value,
                    "error_message": response.error.message[:250],
                })
            if response.result is not None:
                mlflow.set_tag("urgency", response.result.urgency)


def build_tracker(config: Optional[TrackingConfig]) -> Optional[MLflowTracker]:
    """Tracker when enabled, otherwise None"""
    if config is None or not config.enabled:
        return None
    try:
        return MLflowTracker(config)
    except Exception as e:
        logger.warning(f"Failed to initialise MLflow tracking: {e}")
        return None
