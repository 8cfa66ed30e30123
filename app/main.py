"""
MorphoCalc FastAPI application.

Endpoints:
  POST /api/v1/analyze   detect landmarks in an animal photo and derive measurements
  GET  /health           health check
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import config
from app.api.routes import analysis
from app.models.schemas import HealthResponse

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
)

app = FastAPI(
    title=config.app_name,
    version=config.version,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Route registration ─────────────────────────────────────────────────

app.include_router(analysis.router, prefix="/api/v1/analyze", tags=["analysis"])


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", version=config.version)


@app.on_event("startup")
async def startup():
    logger = logging.getLogger(__name__)
    logger.info(
        "%s %s started (scale reference %.0f cm, vision model %s)",
        config.app_name, config.version,
        config.metrics.scale_reference_cm, config.vision.model,
    )
    if not config.vision.api_key:
        logger.warning("VISION_API_KEY is not set; /api/v1/analyze will fail with 500")
