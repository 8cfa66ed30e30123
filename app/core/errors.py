"""
Exception taxonomy for the analysis pipeline.

Only ``MalformedDetectionError`` originates inside the core; the others
describe failures of the vision service that feeds it.
"""

from __future__ import annotations


class MorphoCalcError(Exception):
    """Base class for all pipeline errors."""


class MalformedDetectionError(MorphoCalcError):
    """Detection payload failed structural validation."""


class DetectionParseError(MorphoCalcError):
    """Model response text did not contain a decodable JSON object."""


class VisionServiceError(MorphoCalcError):
    """Vision service call failed (non-2xx status or transport error)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class VisionRateLimitError(VisionServiceError):
    """Provider rejected the call with 429."""


class VisionQuotaError(VisionServiceError):
    """Provider rejected the call with 402 (credits exhausted)."""
