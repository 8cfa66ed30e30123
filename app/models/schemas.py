"""
Pydantic models for API request/response and internal data transfer.

Attributes are snake_case in Python; JSON uses the camelCase names the
vision model and the web client speak.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ── Enums ──────────────────────────────────────────────────────────────

class LandmarkName(str, Enum):
    withers = "withers"
    pin_bone = "pinBone"
    shoulder = "shoulder"
    elbow = "elbow"
    knee = "knee"
    hock = "hock"
    fetlock = "fetlock"
    coronet = "coronet"


# ── Detection ──────────────────────────────────────────────────────────

class Keypoint(_CamelModel):
    """One anatomical landmark in pixel coordinates."""
    x: float
    y: float
    confidence: float = Field(..., ge=0.0, le=1.0)


class LandmarkSet(_CamelModel):
    """Validated detector output for a single image."""
    keypoints: dict[LandmarkName, Keypoint]
    image_width: int = Field(..., gt=0)
    image_height: int = Field(..., gt=0)
    confidence: float = Field(..., ge=0.0, le=1.0)


# ── Measurements ───────────────────────────────────────────────────────

class MetricSet(_CamelModel):
    """Morphometric measurements; None when a required landmark is missing."""
    height_at_withers: float | None = Field(None, description="Centimeters")
    body_length: float | None = Field(None, description="Centimeters")
    rump_angle: float | None = Field(None, description="Degrees, (-180, 180]")


class AnalysisResult(_CamelModel):
    keypoints: dict[LandmarkName, Keypoint]
    metrics: MetricSet
    overall_score: float = Field(..., ge=0.0, le=100.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    image_width: int
    image_height: int


# ── API request / response ─────────────────────────────────────────────

class AnalyzeRequest(_CamelModel):
    image_url: str
    animal_type: str | None = None


class AnalyzeResponse(AnalysisResult):
    processing_time: int = Field(..., description="Wall-clock milliseconds")
    score_label: str


class HealthResponse(BaseModel):
    status: str
    version: str


class ErrorResponse(BaseModel):
    detail: str
