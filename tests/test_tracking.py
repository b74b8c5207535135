"""
Tests for MLflow tracking of analysis requests.
"""

from conftest import RATE_LIMITED, make_result

from sentinel.analysis.client import AnalysisResponse
from sentinel.config.config import TrackingConfig
from sentinel.tracking import mlflow_tracker
from sentinel.tracking.mlflow_tracker import MLflowTracker, build_tracker


class RecordingMLflow:
    """Captures the mlflow calls made by the tracker"""

    def __init__(self):
        self.calls = []

    def set_tracking_uri(self, uri):
        self.calls.append(("set_tracking_uri", uri))

    def set_experiment(self, name):
        self.calls.append(("set_experiment", name))

    def start_run(self, run_name=None):
        self.calls.append(("start_run", run_name))
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def log_params(self, params):
        self.calls.append(("log_params", params))

    def log_metrics(self, metrics):
        self.calls.append(("log_metrics", metrics))

    def set_tags(self, tags):
        self.calls.append(("set_tags", tags))

    def set_tag(self, key, value):
        self.calls.append(("set_tag", key, value))


class TestBuildTracker:

    def test_disabled_returns_none(self):
        assert build_tracker(TrackingConfig()) is None
        assert build_tracker(None) is None

    def test_init_failure_returns_none(self, monkeypatch):
        class Unreachable(RecordingMLflow):
            def set_experiment(self, name):
                raise ConnectionError("tracking server unreachable")

        monkeypatch.setattr(mlflow_tracker, "mlflow", Unreachable())
        assert build_tracker(TrackingConfig(enabled=True)) is None


class TestLogAnalysis:
    """Test per-request run logging."""

    def test_success_logged(self, monkeypatch):
        recorder = RecordingMLflow()
        monkeypatch.setattr(mlflow_tracker, "mlflow", recorder)
        tracker = MLflowTracker(TrackingConfig(enabled=True, tracking_uri="file:///tmp/mlruns"))

        response = AnalysisResponse(alert_id="ALT-1", result=make_result("ALT-1"), total_tokens=30)
        tracker.log_analysis(response, provider="groq", model="llama")

        names = [call[0] for call in recorder.calls]
        assert names[:2] == ["set_tracking_uri", "set_experiment"]
        metrics = [call[1] for call in recorder.calls if call[0] == "log_metrics"][0]
        assert metrics["success"] == 1
        assert metrics["total_tokens"] == 30
        assert ("set_tag", "urgency", "High") in recorder.calls

    def test_error_tagged(self, monkeypatch):
        recorder = RecordingMLflow()
        monkeypatch.setattr(mlflow_tracker, "mlflow", recorder)
        tracker = MLflowTracker(TrackingConfig(enabled=True))

        tracker.log_analysis(AnalysisResponse(alert_id="ALT-1", error=RATE_LIMITED), provider="groq", model="llama")

        tags = [call[1] for call in recorder.calls if call[0] == "set_tags"][0]
        assert tags["error_kind"] == "rate_limited"
