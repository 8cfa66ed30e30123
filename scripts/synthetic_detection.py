#!/usr/bin/env python3
"""
Synthetic side-view landmark detections with analytically known ground truth.

Places the eight landmarks of a standing animal on an image so that the
withers height, body length and rump angle are known exactly under the
fixed pixel-to-cm scale, giving ground truth for validating the
measurement pipeline.

Usage:
    python scripts/synthetic_detection.py [output.json]
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path

import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.config import config


@dataclass
class AnimalProfile:
    """Side-view body proportions in centimeters."""

    withers_height_cm: float = 125.0
    body_length_cm: float = 140.0
    rump_drop_cm: float = 8.0        # pin bone below withers
    shoulder_drop_cm: float = 12.0   # point of shoulder below withers
    shoulder_forward_cm: float = 10.0

    image_width: int = 1200
    image_height: int = 900
    confidence: float = 0.9


def generate_detection(
    profile: AnimalProfile | None = None,
) -> tuple[dict, dict]:
    """
    Build a detection payload and its ground truth.

    Returns (payload, ground_truth).  The payload uses the camelCase
    wire format the vision model returns.
    """
    p = profile or AnimalProfile()
    scale = min(p.image_width, p.image_height) / config.metrics.scale_reference_cm

    # Ground line and withers x in pixels; animal faces left.
    ground_y = p.image_height * 0.92
    withers_x = p.image_width * 0.25
    withers_y = ground_y - p.withers_height_cm * scale

    shoulder = np.array([
        withers_x - p.shoulder_forward_cm * scale,
        withers_y + p.shoulder_drop_cm * scale,
    ])

    # Pin bone placed at body_length from the shoulder, at the rump drop
    pin_y = withers_y + p.rump_drop_cm * scale
    dy = pin_y - shoulder[1]
    dx = np.sqrt(max((p.body_length_cm * scale) ** 2 - dy ** 2, 0.0))
    pin_bone = np.array([shoulder[0] + dx, pin_y])

    points = {
        "withers": (withers_x, withers_y),
        "pinBone": tuple(pin_bone),
        "shoulder": tuple(shoulder),
        "elbow": (shoulder[0] + 5 * scale, withers_y + 0.55 * p.withers_height_cm * scale),
        "knee": (shoulder[0] + 3 * scale, ground_y - 0.30 * p.withers_height_cm * scale),
        "hock": (pin_bone[0] - 8 * scale, ground_y - 0.35 * p.withers_height_cm * scale),
        "fetlock": (withers_x, ground_y - 0.08 * p.withers_height_cm * scale),
        "coronet": (withers_x, ground_y),
    }

    payload = {
        "keypoints": {
            name: {"x": float(x), "y": float(y), "confidence": p.confidence}
            for name, (x, y) in points.items()
        },
        "imageWidth": p.image_width,
        "imageHeight": p.image_height,
        "confidence": p.confidence,
    }

    angle = float(np.degrees(np.arctan2(pin_y - withers_y, pin_bone[0] - withers_x)))
    ground_truth = {
        "height_at_withers_cm": p.withers_height_cm,
        "body_length_cm": p.body_length_cm,
        "rump_angle_deg": angle,
        "pixels_per_cm": scale,
    }
    return payload, ground_truth


def add_pixel_noise(payload: dict, noise_std: float = 1.0, seed: int = 0) -> dict:
    """Gaussian jitter on every keypoint coordinate (pixels)."""
    rng = np.random.default_rng(seed)
    noisy = json.loads(json.dumps(payload))
    for kp in noisy["keypoints"].values():
        dx, dy = rng.normal(0.0, noise_std, size=2)
        kp["x"] = float(kp["x"] + dx)
        kp["y"] = float(kp["y"] + dy)
    return noisy


def drop_landmarks(payload: dict, names: list[str]) -> dict:
    """Copy of the payload without the named keypoints."""
    reduced = json.loads(json.dumps(payload))
    for name in names:
        reduced["keypoints"].pop(name, None)
    return reduced


def make_variants(n: int = 5, seed: int = 42) -> list[tuple[dict, dict]]:
    """Reproducible batch of animals with varied size, posture and framing."""
    rng = np.random.default_rng(seed)
    variants = []
    sizes = [(1024, 768), (1280, 720), (1600, 1200), (1920, 1080)]
    for i in range(n):
        width, height = sizes[int(rng.integers(len(sizes)))]
        profile = AnimalProfile(
            withers_height_cm=float(rng.uniform(100, 125)),
            body_length_cm=float(rng.uniform(115, 140)),
            rump_drop_cm=float(rng.uniform(-5, 15)),
            image_width=width,
            image_height=height,
            confidence=float(rng.uniform(0.5, 1.0)),
        )
        payload, gt = generate_detection(profile)
        gt["variant_id"] = i
        variants.append((payload, gt))
    return variants


def main():
    payload, gt = generate_detection()
    text = json.dumps(payload, indent=2)
    if len(sys.argv) > 1:
        Path(sys.argv[1]).write_text(text)
        print(f"Wrote {sys.argv[1]}")
    else:
        print(text)
    for k, v in gt.items():
        print(f"  {k:<22s} {v:8.2f}", file=sys.stderr)


if __name__ == "__main__":
    main()
