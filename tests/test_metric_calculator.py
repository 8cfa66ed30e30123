"""Tests for pixel-space geometry → morphometric measurements."""

import math

import pytest

from app.config import MetricConfig
from app.core.landmark_normalizer import normalize_detection
from app.core.metric_calculator import (
    body_length,
    calculate_metrics,
    height_at_withers,
    pixels_per_cm,
    rump_angle,
)
from app.models.schemas import Keypoint


def _kp(x, y):
    return Keypoint(x=x, y=y, confidence=1.0)


def _metrics(keypoints, width=800, height=600):
    return calculate_metrics(normalize_detection({
        "keypoints": {
            name: {"x": x, "y": y, "confidence": 1.0}
            for name, (x, y) in keypoints.items()
        },
        "imageWidth": width,
        "imageHeight": height,
        "confidence": 1.0,
    }))


class TestScale:

    def test_landscape(self):
        assert pixels_per_cm(800, 600) == 4.0

    def test_portrait_uses_shorter_side(self):
        assert pixels_per_cm(600, 800) == 4.0

    def test_configurable_reference(self):
        assert pixels_per_cm(800, 600, MetricConfig(scale_reference_cm=100.0)) == 6.0


class TestFormulas:

    def test_height_is_vertical_only(self):
        assert height_at_withers(_kp(100, 50), _kp(400, 400), 4.0) == 87.5

    def test_height_is_absolute(self):
        assert height_at_withers(_kp(0, 400), _kp(0, 50), 4.0) == 87.5

    def test_body_length_euclidean(self):
        assert body_length(_kp(0, 0), _kp(30, 40), 2.0) == 25.0

    @pytest.mark.parametrize("dx,dy,expected", [
        (100, 0, 0.0),
        (0, 100, 90.0),
        (-100, 0, 180.0),
        (0, -100, -90.0),
        (100, 100, 45.0),
    ])
    def test_rump_angle_direction(self, dx, dy, expected):
        assert rump_angle(_kp(200, 200), _kp(200 + dx, 200 + dy)) == pytest.approx(expected)


class TestFullLandmarkSet:

    def test_reference_scenario(self, full_payload):
        metrics = calculate_metrics(normalize_detection(full_payload))
        assert metrics.height_at_withers == 87.5
        assert metrics.body_length == round(math.hypot(180, 320) / 4.0, 2)
        assert metrics.rump_angle == round(math.degrees(math.atan2(330, 200)), 2)

    def test_values_have_two_decimals(self, full_payload):
        metrics = calculate_metrics(normalize_detection(full_payload))
        for value in (metrics.height_at_withers, metrics.body_length, metrics.rump_angle):
            assert round(value, 2) == value

    def test_deterministic(self, full_payload):
        landmarks = normalize_detection(full_payload)
        assert calculate_metrics(landmarks) == calculate_metrics(landmarks)

    def test_keypoint_confidence_does_not_gate_presence(self, full_payload):
        for kp in full_payload["keypoints"].values():
            kp["confidence"] = 0.0
        metrics = calculate_metrics(normalize_detection(full_payload))
        assert metrics.height_at_withers is not None
        assert metrics.body_length is not None
        assert metrics.rump_angle is not None


class TestMissingLandmarks:

    def test_length_only(self, length_only_payload):
        metrics = calculate_metrics(normalize_detection(length_only_payload))
        assert metrics.height_at_withers is None
        assert metrics.rump_angle is None
        assert metrics.body_length == round(math.hypot(180, 320) / 4.0, 2)

    def test_empty(self, empty_payload):
        metrics = calculate_metrics(normalize_detection(empty_payload))
        assert metrics.height_at_withers is None
        assert metrics.body_length is None
        assert metrics.rump_angle is None

    @pytest.mark.parametrize("missing,absent", [
        ("withers", {"height_at_withers", "rump_angle"}),
        ("coronet", {"height_at_withers"}),
        ("shoulder", {"body_length"}),
        ("pinBone", {"body_length", "rump_angle"}),
    ])
    def test_each_metric_depends_on_its_landmarks(self, full_payload, missing, absent):
        del full_payload["keypoints"][missing]
        metrics = calculate_metrics(normalize_detection(full_payload))
        for field in ("height_at_withers", "body_length", "rump_angle"):
            value = getattr(metrics, field)
            if field in absent:
                assert value is None, field
            else:
                assert value is not None, field

    def test_adding_landmark_never_removes_metric(self, length_only_payload):
        before = calculate_metrics(normalize_detection(length_only_payload))
        length_only_payload["keypoints"]["withers"] = {"x": 100, "y": 50, "confidence": 0.9}
        after = calculate_metrics(normalize_detection(length_only_payload))
        assert after.body_length == before.body_length
        assert after.rump_angle is not None


class TestZeroValuedMetrics:

    def test_level_rump_is_present(self):
        metrics = _metrics({"withers": (100, 50), "pinBone": (300, 50)})
        assert metrics.rump_angle == 0.0
        assert metrics.rump_angle is not None

    def test_zero_height_is_present(self):
        metrics = _metrics({"withers": (100, 50), "coronet": (200, 50)})
        assert metrics.height_at_withers == 0.0

    def test_coincident_points_give_zero_length(self):
        metrics = _metrics({"shoulder": (100, 50), "pinBone": (100, 50)})
        assert metrics.body_length == 0.0

    def test_near_level_rump_has_no_negative_zero(self):
        metrics = _metrics({"withers": (100, 50.01), "pinBone": (300, 50)})
        assert metrics.rump_angle == 0.0
        assert math.copysign(1.0, metrics.rump_angle) == 1.0
        assert '"rumpAngle":0.0' in metrics.model_dump_json(by_alias=True)

    def test_reverse_facing_rump_is_180(self):
        metrics = _metrics({"withers": (300, 50), "pinBone": (100, 50)})
        assert metrics.rump_angle == 180.0


class TestSyntheticGroundTruth:

    def test_recovers_known_measurements(self, synthetic_animal):
        payload, gt = synthetic_animal
        metrics = calculate_metrics(normalize_detection(payload))
        assert metrics.height_at_withers == pytest.approx(gt["height_at_withers_cm"], abs=0.01)
        assert metrics.body_length == pytest.approx(gt["body_length_cm"], abs=0.01)
        assert metrics.rump_angle == pytest.approx(gt["rump_angle_deg"], abs=0.01)

    def test_variants(self):
        from scripts.synthetic_detection import make_variants

        for payload, gt in make_variants(8, seed=7):
            metrics = calculate_metrics(normalize_detection(payload))
            assert metrics.height_at_withers == pytest.approx(
                gt["height_at_withers_cm"], abs=0.01,
            ), f"variant {gt['variant_id']}"
            assert metrics.body_length == pytest.approx(gt["body_length_cm"], abs=0.01)

    def test_pixel_noise_bounded(self, synthetic_animal):
        from scripts.synthetic_detection import add_pixel_noise

        payload, gt = synthetic_animal
        noisy = add_pixel_noise(payload, noise_std=2.0, seed=42)
        metrics = calculate_metrics(normalize_detection(noisy))
        # 2 px jitter at 6 px/cm stays within a few cm
        assert abs(metrics.height_at_withers - gt["height_at_withers_cm"]) < 3.0
        assert abs(metrics.body_length - gt["body_length_cm"]) < 3.0
