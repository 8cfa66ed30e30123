"""
Client for the external vision-completion service.

Sends the image URL with a structured prompt to an OpenAI-compatible
chat-completions endpoint and returns the decoded landmark JSON.  The
model usually wraps its answer in a markdown code fence; that markup is
stripped before decoding.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import requests

from app.config import VisionConfig
from app.core.errors import (
    DetectionParseError,
    VisionQuotaError,
    VisionRateLimitError,
    VisionServiceError,
)
from app.models.schemas import LandmarkName

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:[A-Za-z0-9_-]+)?[ \t]*\n?(.*?)```", re.DOTALL)
_OPEN_FENCE_RE = re.compile(r"^```[A-Za-z0-9_-]*\s*")


def _system_prompt(animal_type: str) -> str:
    point = '{"x": number, "y": number, "confidence": number}'
    keypoints = ",\n".join(f'    "{name.value}": {point}' for name in LandmarkName)
    return (
        f"You are an expert animal anatomical analysis system. Analyze the uploaded "
        f"{animal_type} image and extract key anatomical landmarks for morphometric "
        f"measurements. Return ONLY valid JSON with the following structure:\n"
        f"{{\n  \"keypoints\": {{\n{keypoints}\n  }},\n"
        f"  \"imageWidth\": number,\n  \"imageHeight\": number,\n  \"confidence\": number\n}}\n"
        f"Coordinates should be in pixels relative to the image dimensions. "
        f"Confidence should be 0-1."
    )


# ── Response text parsing ──────────────────────────────────────────────

def strip_code_fences(text: str) -> str:
    """Return the body of the first fenced block, or the trimmed text if none."""
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    # truncated answer: opening fence without a closing one
    return _OPEN_FENCE_RE.sub("", text.strip()).strip()


def parse_detection_text(text: str) -> dict:
    """Decode the model's textual answer into a JSON object."""
    body = strip_code_fences(text)
    if not body:
        raise DetectionParseError("Empty AI response")
    try:
        data = json.loads(body)
    except ValueError as exc:  # JSONDecodeError, or an over-long integer literal
        raise DetectionParseError(f"Invalid AI response format: {exc}") from exc
    if not isinstance(data, dict):
        raise DetectionParseError("Invalid AI response format: expected a JSON object")
    return data


# ── Client ─────────────────────────────────────────────────────────────

class VisionClient:
    """Landmark detection through a hosted vision model."""

    def __init__(self, cfg: VisionConfig):
        self.cfg = cfg

    def build_request(self, image_url: str, animal_type: str) -> dict[str, Any]:
        return {
            "model": self.cfg.model,
            "messages": [
                {"role": "system", "content": _system_prompt(animal_type)},
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "text",
                            "text": (
                                f"Analyze this {animal_type} image and identify "
                                f"anatomical keypoints for morphometric analysis."
                            ),
                        },
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                },
            ],
        }

    def complete(self, image_url: str, animal_type: str) -> str:
        """Call the service and return the raw message content."""
        if not self.cfg.api_key:
            raise VisionServiceError("Vision API key is not configured")

        try:
            response = requests.post(
                self.cfg.api_url,
                headers={
                    "Authorization": f"Bearer {self.cfg.api_key}",
                    "Content-Type": "application/json",
                },
                json=self.build_request(image_url, animal_type),
                timeout=self.cfg.timeout_s,
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Vision service request failed: %s", exc)
            raise VisionServiceError(f"Vision service unreachable: {exc}") from exc

        if not response.ok:
            logger.error("Vision service error: %s %s", response.status_code, response.text)
            if response.status_code == 429:
                raise VisionRateLimitError(
                    "Rate limit exceeded. Please try again later.", 429,
                )
            if response.status_code == 402:
                raise VisionQuotaError(
                    "AI usage limit reached. Please check your workspace credits.", 402,
                )
            raise VisionServiceError(
                f"Vision service error: {response.status_code}", response.status_code,
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise DetectionParseError("No content in AI response") from exc
        if not content:
            raise DetectionParseError("No content in AI response")
        return content

    def detect(self, image_url: str, animal_type: str | None = None) -> dict:
        """Return the decoded detection payload for an image."""
        animal_type = animal_type or self.cfg.default_animal_type
        logger.info("Requesting landmarks for %s image", animal_type)
        content = self.complete(image_url, animal_type)
        try:
            return parse_detection_text(content)
        except DetectionParseError:
            logger.error("Failed to parse AI response: %r", content)
            raise
