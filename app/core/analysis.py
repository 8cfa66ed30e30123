"""
Analysis pipeline: detection payload → AnalysisResult.

Steps:
  1. Normalize the detection (the only step that can fail)
  2. Calculate metrics
  3. Aggregate the overall score
"""

from __future__ import annotations

import logging
from typing import Any

from app.config import AppConfig, config as default_config
from app.core.landmark_normalizer import normalize_detection
from app.core.metric_calculator import calculate_metrics
from app.core.scoring import overall_score
from app.models.schemas import AnalysisResult, LandmarkSet

logger = logging.getLogger(__name__)


def analyze_landmarks(
    landmarks: LandmarkSet, config: AppConfig | None = None,
) -> AnalysisResult:
    config = config or default_config

    metrics = calculate_metrics(landmarks, config.metrics)
    score = overall_score(metrics, landmarks.confidence, config.scoring)

    return AnalysisResult(
        keypoints=landmarks.keypoints,
        metrics=metrics,
        overall_score=score,
        confidence=landmarks.confidence,
        image_width=landmarks.image_width,
        image_height=landmarks.image_height,
    )


def analyze_detection(
    payload: Any, config: AppConfig | None = None,
) -> AnalysisResult:
    """
    Run the complete pipeline on a decoded detection payload.

    Raises MalformedDetectionError if the payload fails structural validation.
    """
    landmarks = normalize_detection(payload)
    result = analyze_landmarks(landmarks, config)
    logger.info(
        "Analysis: %d keypoints, score %.2f", len(result.keypoints), result.overall_score,
    )
    return result
