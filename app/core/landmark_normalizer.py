"""
Landmark normalization: raw detection payload → validated LandmarkSet.

The vision model is an untrusted source.  Only three defects are fatal:

  • the payload is not a JSON object
  • imageWidth / imageHeight missing, non-integral or ≤ 0
  • keypoints missing or not a mapping

Everything else degrades gracefully:

  Irregularity                      │  Handling
  ──────────────────────────────────┼──────────────────────────────
  unknown landmark name             │  dropped
  x / y not a finite number         │  keypoint dropped
  keypoint confidence out of [0,1]  │  clamped
  keypoint confidence missing / NaN │  0.0
  overall confidence out of [0,1]   │  clamped
  overall confidence missing / NaN  │  0.0
  coordinates outside the image     │  kept as-is (logged)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from app.core.errors import MalformedDetectionError
from app.models.schemas import Keypoint, LandmarkName, LandmarkSet

logger = logging.getLogger(__name__)

_KNOWN_NAMES = {name.value for name in LandmarkName}


# ── Tagged result ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class DetectionResult:
    """Either a validated LandmarkSet or the reason validation failed."""
    landmarks: LandmarkSet | None = None
    error: MalformedDetectionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> LandmarkSet:
        if self.error is not None:
            raise self.error
        return self.landmarks


# ── Scalar helpers ─────────────────────────────────────────────────────

def _as_finite_float(value: Any) -> float | None:
    """Float value of a JSON number, or None for anything else (bools included)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        # JSON integers are unbounded
        return None
    return value if math.isfinite(value) else None


def _as_dimension(value: Any) -> int | None:
    """Positive integral pixel dimension, or None."""
    v = _as_finite_float(value)
    if v is None or v <= 0 or not v.is_integer():
        return None
    return int(v)


def clamp_confidence(value: Any) -> float:
    """Map any detector confidence onto [0, 1]; unusable values become 0."""
    v = _as_finite_float(value)
    if v is None:
        if isinstance(value, int) and not isinstance(value, bool):
            # integer too large for a float
            return 1.0 if value > 0 else 0.0
        return 0.0
    return float(np.clip(v, 0.0, 1.0))


# ── Keypoints ──────────────────────────────────────────────────────────

def _normalize_keypoint(
    name: str, raw: Any, width: int, height: int,
) -> Keypoint | None:
    if not isinstance(raw, dict):
        logger.debug("Dropping keypoint %r: not an object", name)
        return None

    x = _as_finite_float(raw.get("x"))
    y = _as_finite_float(raw.get("y"))
    if x is None or y is None:
        logger.debug("Dropping keypoint %r: non-numeric coordinates", name)
        return None

    if not (0 <= x < width and 0 <= y < height):
        logger.debug("Keypoint %r at (%.1f, %.1f) lies outside %dx%d", name, x, y, width, height)

    conf = clamp_confidence(raw.get("confidence"))
    if conf != raw.get("confidence"):
        logger.debug("Keypoint %r confidence %r → %.2f", name, raw.get("confidence"), conf)

    return Keypoint(x=x, y=y, confidence=conf)


# ── Public API ─────────────────────────────────────────────────────────

def validate_detection(payload: Any) -> DetectionResult:
    """
    Validate and reshape a decoded detection payload.

    Never raises; structural failures are returned in ``DetectionResult.error``.
    """
    if not isinstance(payload, dict):
        return DetectionResult(error=MalformedDetectionError(
            f"Detection payload must be an object, got {type(payload).__name__}"
        ))

    width = _as_dimension(payload.get("imageWidth"))
    height = _as_dimension(payload.get("imageHeight"))
    if width is None or height is None:
        return DetectionResult(error=MalformedDetectionError(
            "imageWidth and imageHeight must be positive integers "
            f"(got {payload.get('imageWidth')!r} x {payload.get('imageHeight')!r})"
        ))

    raw_keypoints = payload.get("keypoints")
    if not isinstance(raw_keypoints, dict):
        return DetectionResult(error=MalformedDetectionError(
            "keypoints must be an object mapping landmark names to points"
        ))

    keypoints: dict[LandmarkName, Keypoint] = {}
    for name, raw in raw_keypoints.items():
        if name not in _KNOWN_NAMES:
            logger.debug("Dropping unknown landmark %r", name)
            continue
        kp = _normalize_keypoint(name, raw, width, height)
        if kp is not None:
            keypoints[LandmarkName(name)] = kp

    raw_conf = payload.get("confidence")
    if _as_finite_float(raw_conf) is None and not isinstance(raw_conf, int):
        logger.warning("Detection confidence %r is not a number; using 0.0", raw_conf)
    confidence = clamp_confidence(raw_conf)

    landmarks = LandmarkSet(
        keypoints=keypoints,
        image_width=width,
        image_height=height,
        confidence=confidence,
    )
    logger.debug(
        "Normalized detection: %d/%d keypoints kept, confidence %.2f",
        len(keypoints), len(raw_keypoints), confidence,
    )
    return DetectionResult(landmarks=landmarks)


def normalize_detection(payload: Any) -> LandmarkSet:
    """Like ``validate_detection`` but raises ``MalformedDetectionError``."""
    return validate_detection(payload).unwrap()
