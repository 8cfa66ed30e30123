"""
MorphoCalc configuration.

All tunable parameters live here so the measurement pipeline
is fully configurable without touching algorithmic code.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MetricConfig(BaseSettings):
    """Pixel-to-centimeter conversion and output precision."""

    # Shorter image side is assumed to span this many centimeters.
    # No calibration target is available from a single photo.
    scale_reference_cm: float = 150.0
    decimals: int = 2


class ScoringConfig(BaseSettings):
    """Weights of the overall quality score (they sum to 100)."""

    w_height_at_withers: float = 30.0
    w_body_length: float = 30.0
    w_rump_angle: float = 20.0
    w_confidence: float = 20.0
    decimals: int = 2

    # Grade thresholds shown next to the score
    excellent_min: float = 80.0
    good_min: float = 60.0
    fair_min: float = 40.0


class VisionConfig(BaseSettings):
    """External vision-completion service (OpenAI-compatible chat endpoint)."""

    model_config = SettingsConfigDict(env_prefix="VISION_")

    api_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    api_key: str = ""
    model: str = "google/gemini-2.5-pro"
    timeout_s: float = 60.0
    default_animal_type: str = "cattle"


class AppConfig(BaseSettings):
    """Top-level application configuration."""

    app_name: str = "MorphoCalc"
    version: str = "0.1.0"
    debug: bool = False
    cors_origins: list[str] = ["*"]

    metrics: MetricConfig = Field(default_factory=MetricConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    vision: VisionConfig = Field(default_factory=VisionConfig)


config = AppConfig()
