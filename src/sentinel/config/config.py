"""
Configuration for the Sentinel triage console.

All sections are plain dataclasses with defaults; `SentinelConfig.from_env`
overlays values from the environment (a .env file is honoured).
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import os

from dotenv import load_dotenv

load_dotenv()


GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = os.getenv("SENTINEL_MODEL", os.getenv("GROQ_MODEL", "llama-3.1-8b-instant"))

# (label, min score, max score, initial count, display color)
DEFAULT_BUCKETS: List[Tuple[str, int, int, int, str]] = [
    ("0-20", 0, 20, 124, "#3b82f6"),
    ("21-40", 21, 40, 86, "#6366f1"),
    ("41-60", 41, 60, 42, "#8b5cf6"),
    ("61-80", 61, 80, 28, "#f59e0b"),
    ("81-100", 81, 100, 12, "#ef4444"),
]


class ConfigValidationError(ValueError):
    pass


@dataclass
class AnalysisConfig:
    """Configuration for the reasoning service client"""
    model: str = field(default_factory=lambda: DEFAULT_MODEL)
    temperature: float = 0.1
    max_tokens: int = 2000
    timeout_seconds: float = 30.0
    base_url: Optional[str] = GROQ_BASE_URL
    api_key: Optional[str] = None


@dataclass
class MetricsConfig:
    """Histogram and throughput settings"""
    throughput_window: int = 7
    throughput_min: float = 200.0
    throughput_max: float = 1500.0
    throughput_step: float = 50.0
    throughput_seed_range: Tuple[float, float] = (400.0, 1000.0)
    decay_probability: float = 0.3
    tick_interval_seconds: float = 5.0
    buckets: List[Tuple[str, int, int, int, str]] = field(default_factory=lambda: list(DEFAULT_BUCKETS))


@dataclass
class SessionConfig:
    fallback_delay_seconds: float = 1.5
    sample_rate: int = 24000
    num_channels: int = 1


@dataclass
class FeedConfig:
    """Synthetic transaction feed settings"""
    interval_seconds: float = 2.0
    history_size: int = 15
    flag_threshold: int = 85
    promote_flagged: bool = False


@dataclass
class TrackingConfig:
    enabled: bool = False
    tracking_uri: Optional[str] = None
    experiment_name: str = "sentinel-investigations"


@dataclass
class SentinelConfig:
    """Top-level configuration"""
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)

    @classmethod
    def from_env(cls) -> "SentinelConfig":
        config = cls(
            analysis=AnalysisConfig(
                temperature=float(os.getenv("SENTINEL_TEMPERATURE", "0.1")),
                timeout_seconds=float(os.getenv("SENTINEL_ANALYSIS_TIMEOUT", "30")),
            ),
            metrics=MetricsConfig(
                throughput_window=int(os.getenv("SENTINEL_THROUGHPUT_WINDOW", "7")),
                tick_interval_seconds=float(os.getenv("SENTINEL_TICK_INTERVAL", "5")),
            ),
            session=SessionConfig(
                fallback_delay_seconds=float(os.getenv("SENTINEL_FALLBACK_DELAY", "1.5")),
            ),
            feed=FeedConfig(
                interval_seconds=float(os.getenv("SENTINEL_FEED_INTERVAL", "2")),
                promote_flagged=os.getenv("SENTINEL_PROMOTE_FLAGGED", "0") == "1",
            ),
            tracking=TrackingConfig(
                enabled=os.getenv("SENTINEL_MLFLOW_ENABLED", "0") == "1",
                tracking_uri=os.getenv("MLFLOW_TRACKING_URI"),
                experiment_name=os.getenv("MLFLOW_EXPERIMENT_NAME", "sentinel-investigations"),
            ),
        )
        config.validate()
        return config

    def validate(self) -> None:
        metrics = self.metrics
        if metrics.throughput_window <= 0:
            raise ConfigValidationError("Throughput window must be positive")
        if metrics.throughput_min >= metrics.throughput_max:
            raise ConfigValidationError("Throughput bounds must satisfy min < max")
        if not 0.0 <= metrics.decay_probability <= 1.0:
            raise ConfigValidationError("Decay probability must lie in [0, 1]")
        if metrics.tick_interval_seconds <= 0:
            raise ConfigValidationError("Tick interval must be positive")
        if not metrics.buckets:
            raise ConfigValidationError("At least one histogram bucket is required")
        for label, low, high, count, _color in metrics.buckets:
            if low > high or count < 0:
                raise ConfigValidationError(f"Invalid histogram bucket: {label}")
        if self.analysis.timeout_seconds <= 0:
            raise ConfigValidationError("Analysis timeout must be positive")
        if self.session.fallback_delay_seconds < 0:
            raise ConfigValidationError("Fallback delay cannot be negative")
        if self.session.sample_rate <= 0 or self.session.num_channels <= 0:
            raise ConfigValidationError("Sample rate and channel count must be positive")
        if self.feed.interval_seconds <= 0 or self.feed.history_size <= 0:
            raise ConfigValidationError("Feed interval and history size must be positive")
