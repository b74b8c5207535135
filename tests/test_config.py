"""
Tests for configuration defaults, environment overlay and validation.
"""

import pytest

from sentinel.config.config import (
    GROQ_BASE_URL, ConfigValidationError, MetricsConfig, SentinelConfig, SessionConfig,
)


class TestDefaults:

    def test_defaults_validate(self):
        config = SentinelConfig()
        config.validate()
        assert config.analysis.base_url == GROQ_BASE_URL
        assert config.analysis.timeout_seconds == 30.0
        assert config.session.fallback_delay_seconds == 1.5
        assert config.metrics.throughput_window == 7
        assert config.feed.history_size == 15
        assert config.tracking.enabled is False


class TestValidation:
    """Test rejection of inconsistent settings."""

    @pytest.mark.parametrize("metrics", [
        MetricsConfig(throughput_window=0),
        MetricsConfig(throughput_min=1500, throughput_max=200),
        MetricsConfig(decay_probability=1.5),
        MetricsConfig(buckets=[]),
        MetricsConfig(buckets=[("bad", 50, 10, 0, "#000")]),
    ])
    def test_invalid_metrics(self, metrics):
        with pytest.raises(ConfigValidationError):
            SentinelConfig(metrics=metrics).validate()

    def test_negative_fallback_delay(self):
        with pytest.raises(ConfigValidationError):
            SentinelConfig(session=SessionConfig(fallback_delay_seconds=-1)).validate()


class TestFromEnv:
    """Test the environment overlay."""

    def test_env_values(self, monkeypatch):
        monkeypatch.setenv("SENTINEL_FALLBACK_DELAY", "0.2")
        monkeypatch.setenv("SENTINEL_ANALYSIS_TIMEOUT", "10")
        monkeypatch.setenv("SENTINEL_PROMOTE_FLAGGED", "1")
        monkeypatch.setenv("SENTINEL_MLFLOW_ENABLED", "1")
        monkeypatch.setenv("MLFLOW_EXPERIMENT_NAME", "triage-test")

        config = SentinelConfig.from_env()

        assert config.session.fallback_delay_seconds == 0.2
        assert config.analysis.timeout_seconds == 10.0
        assert config.feed.promote_flagged is True
        assert config.tracking.enabled is True
        assert config.tracking.experiment_name == "triage-test"

    def test_invalid_env_rejected(self, monkeypatch):
        monkeypatch.setenv("SENTINEL_THROUGHPUT_WINDOW", "0")
        with pytest.raises(ConfigValidationError):
            SentinelConfig.from_env()
