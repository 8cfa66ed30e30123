"""
Shared test fixtures.
"""

import sys
from pathlib import Path

import pytest

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


def _point(x: float, y: float, confidence: float = 0.9) -> dict:
    return {"x": x, "y": y, "confidence": confidence}


@pytest.fixture
def full_payload() -> dict:
    """800×600 image (4 px/cm) with every measurement landmark present."""
    return {
        "keypoints": {
            "withers": _point(100, 50),
            "coronet": _point(100, 400),
            "shoulder": _point(120, 60),
            "pinBone": _point(300, 380),
        },
        "imageWidth": 800,
        "imageHeight": 600,
        "confidence": 0.9,
    }


@pytest.fixture
def length_only_payload() -> dict:
    """Only shoulder and pin bone: body length is the sole measurable metric."""
    return {
        "keypoints": {
            "shoulder": _point(120, 60),
            "pinBone": _point(300, 380),
        },
        "imageWidth": 800,
        "imageHeight": 600,
        "confidence": 0.7,
    }


@pytest.fixture
def empty_payload() -> dict:
    return {
        "keypoints": {},
        "imageWidth": 800,
        "imageHeight": 600,
        "confidence": 0.5,
    }


@pytest.fixture
def synthetic_animal():
    """Synthetic side-view detection with known ground truth."""
    from scripts.synthetic_detection import generate_detection
    return generate_detection()
