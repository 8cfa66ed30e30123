from .landmark_normalizer import normalize_detection, validate_detection
from .metric_calculator import calculate_metrics, pixels_per_cm
from .scoring import overall_score, score_label
from .analysis import analyze_detection, analyze_landmarks
