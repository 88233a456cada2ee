# src/hooklab/main.py
"""Main entry point for the HookLab API."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from hooklab.api.v1 import (
    content_router,
    hooks_router,
    premium_router,
    quota_router,
)
from hooklab.core.settings import settings
from hooklab.db.session import create_tables
from hooklab.services.gemini import get_gemini_client
from hooklab.services.trends import get_neynar_client

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="HookLab API",
    description="Hook generation gated by free credits and an on-chain subscription",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(hooks_router, prefix="/api/v1")
app.include_router(content_router, prefix="/api/v1")
app.include_router(quota_router, prefix="/api/v1")
app.include_router(premium_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.auto_create_tables:
        create_tables()
        logger.info("Database tables ensured")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_gemini_client().close()
    await get_neynar_client().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("hooklab.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
