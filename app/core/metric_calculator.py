"""
Morphometric measurements from 2D landmark geometry.

Scale
─────
A single photograph carries no calibration target, so the pixel-to-cm
scale is a fixed-proportion heuristic: the shorter image side is taken
to span ``scale_reference_cm`` (150 cm by default).

    scale = min(W, H) / 150        [pixels per cm]

The scale is shared by every metric.  ``pixels_per_cm`` is the single
place to substitute a calibrated strategy.

Measurement definitions
───────────────────────
• Height at withers:  |withers.y − coronet.y| / scale
                      Vertical image distance; an approximation of the
                      ground-projected height, not a true 3D height.
• Body length:        ‖pinBone − shoulder‖ / scale   (Euclidean)
• Rump angle:         atan2(pinBone.y − withers.y, pinBone.x − withers.x)
                      in degrees, range (−180°, 180°].  Image y grows
                      downwards, so a rump lower than the withers gives a
                      positive angle.

A metric is None exactly when one of its landmarks is absent.  A value
of 0 is a real measurement.
"""

from __future__ import annotations

import logging

import numpy as np

from app.config import MetricConfig, config
from app.models.schemas import Keypoint, LandmarkName, LandmarkSet, MetricSet

logger = logging.getLogger(__name__)


# ── Scale ──────────────────────────────────────────────────────────────

def pixels_per_cm(
    image_width: int, image_height: int, cfg: MetricConfig | None = None,
) -> float:
    """Fixed-proportion pixel-to-centimeter scale."""
    cfg = cfg or config.metrics
    return min(image_width, image_height) / cfg.scale_reference_cm


# ── Individual metrics ─────────────────────────────────────────────────

def height_at_withers(withers: Keypoint, coronet: Keypoint, scale: float) -> float:
    return abs(withers.y - coronet.y) / scale


def body_length(shoulder: Keypoint, pin_bone: Keypoint, scale: float) -> float:
    return float(np.hypot(pin_bone.x - shoulder.x, pin_bone.y - shoulder.y)) / scale


def rump_angle(withers: Keypoint, pin_bone: Keypoint) -> float:
    """Direction of the withers → pin bone line, in degrees."""
    dx = pin_bone.x - withers.x
    dy = pin_bone.y - withers.y
    return float(np.degrees(np.arctan2(dy, dx)))


# ── Full metric set ────────────────────────────────────────────────────

def calculate_metrics(
    landmarks: LandmarkSet, cfg: MetricConfig | None = None,
) -> MetricSet:
    """Compute every metric whose landmarks are present."""
    cfg = cfg or config.metrics
    kp = landmarks.keypoints
    scale = pixels_per_cm(landmarks.image_width, landmarks.image_height, cfg)

    withers = kp.get(LandmarkName.withers)
    coronet = kp.get(LandmarkName.coronet)
    shoulder = kp.get(LandmarkName.shoulder)
    pin_bone = kp.get(LandmarkName.pin_bone)

    height = length = angle = None

    if withers is not None and coronet is not None:
        height = round(height_at_withers(withers, coronet, scale), cfg.decimals)

    if shoulder is not None and pin_bone is not None:
        length = round(body_length(shoulder, pin_bone, scale), cfg.decimals)

    if withers is not None and pin_bone is not None:
        # + 0.0 folds a rounded -0.0 into 0.0
        angle = round(rump_angle(withers, pin_bone), cfg.decimals) + 0.0
        # atan2(-0.0, x<0) is -180; keep the range half-open at -180
        if angle == -180.0:
            angle = 180.0

    logger.debug(
        "Metrics at %.3f px/cm: height=%s length=%s angle=%s",
        scale, height, length, angle,
    )
    return MetricSet(height_at_withers=height, body_length=length, rump_angle=angle)
