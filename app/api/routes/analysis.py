"""
Animal analysis endpoint.

Takes an image URL, asks the vision service for anatomical landmarks,
and returns morphometric measurements with an overall quality score.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from app.config import config
from app.core.analysis import analyze_detection
from app.core.errors import (
    DetectionParseError,
    MalformedDetectionError,
    VisionServiceError,
)
from app.core.scoring import score_label
from app.models.schemas import AnalyzeRequest, AnalyzeResponse, ErrorResponse
from app.services.vision_client import VisionClient

logger = logging.getLogger(__name__)
router = APIRouter()

_PASSTHROUGH_STATUSES = {402, 429}


def get_vision_client() -> VisionClient:
    return VisionClient(config.vision)


@router.post(
    "",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse},
        402: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def analyze_animal(
    req: AnalyzeRequest,
    client: VisionClient = Depends(get_vision_client),
):
    """Detect landmarks in an animal photo and derive its measurements."""

    if not req.image_url.strip():
        raise HTTPException(400, "Image URL is required")

    animal_type = req.animal_type or config.vision.default_animal_type
    logger.info("Starting analysis for animal type: %s", animal_type)
    t0 = time.perf_counter()

    try:
        payload = client.detect(req.image_url, animal_type)
        result = analyze_detection(payload, config)
    except VisionServiceError as exc:
        status = exc.status_code if exc.status_code in _PASSTHROUGH_STATUSES else 500
        raise HTTPException(status, str(exc)) from exc
    except (DetectionParseError, MalformedDetectionError) as exc:
        logger.exception("Analysis failed for %s", req.image_url)
        raise HTTPException(500, str(exc)) from exc

    elapsed_ms = int(round((time.perf_counter() - t0) * 1000))
    logger.info("Analysis completed in %d ms (score %.2f)", elapsed_ms, result.overall_score)

    return AnalyzeResponse(
        **result.model_dump(),
        processing_time=elapsed_ms,
        score_label=score_label(result.overall_score, config.scoring),
    )
