"""
Overall quality score for a landmark analysis.

Model
─────
    S = 30·[height] + 30·[length] + 20·[angle] + 20·c

where [m] is 1 when metric m is present and c ∈ [0, 1] is the detector's
overall confidence.  S ∈ [0, 100]; the maximum needs all three metrics
and c = 1.

Coverage outweighs confidence: a complete, moderately confident
detection is more useful for herd decisions than an incomplete one the
model is sure about.

Weights are configurable in AppConfig.scoring.
"""

from __future__ import annotations

import numpy as np

from app.config import ScoringConfig, config
from app.models.schemas import MetricSet


def overall_score(
    metrics: MetricSet, confidence: float, cfg: ScoringConfig | None = None,
) -> float:
    """Weighted completeness plus confidence bonus, clamped to [0, 100]."""
    cfg = cfg or config.scoring

    score = 0.0
    if metrics.height_at_withers is not None:
        score += cfg.w_height_at_withers
    if metrics.body_length is not None:
        score += cfg.w_body_length
    if metrics.rump_angle is not None:
        score += cfg.w_rump_angle

    score += float(np.clip(confidence, 0.0, 1.0)) * cfg.w_confidence

    return round(float(np.clip(score, 0.0, 100.0)), cfg.decimals)


def score_label(score: float, cfg: ScoringConfig | None = None) -> str:
    """Human-readable grade for a score."""
    cfg = cfg or config.scoring
    if score >= cfg.excellent_min:
        return "Excellent"
    if score >= cfg.good_min:
        return "Good"
    if score >= cfg.fair_min:
        return "Fair"
    return "Poor"
