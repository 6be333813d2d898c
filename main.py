"""
Raster Toolkit - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from PIL import Image

from api.exceptions import register_exception_handlers
from api.routers import color, system, transform
from config import get_settings
from core.constants import APIConstants, SystemConstants
from services.image_tool_service import ImageToolService

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.system.log_level),
    format=SystemConstants.LOG_FORMAT,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    logger.info("Starting Raster Toolkit server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")

    # Decoder guard against decompression bombs
    Image.MAX_IMAGE_PIXELS = settings.transform.max_image_pixels

    app.state.image_tool_service = ImageToolService(
        default_quality=settings.transform.jpeg_quality,
        default_compression=settings.transform.png_compression,
    )
    app.state.transform_settings = settings.transform
    app.state.config = settings.to_dict()
    app.state.debug = settings.system.debug

    yield

    logger.info("Raster Toolkit stopped")


# Create FastAPI app
app = FastAPI(
    title="Raster Toolkit",
    description="Resize, watermark, sharpen, rotate and analyze raster images",
    version=APIConstants.API_VERSION,
    lifespan=lifespan,
)

if settings.api.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)

app.include_router(transform.router, prefix="/api/transform", tags=["Transform"])
app.include_router(color.router, prefix="/api/color", tags=["Color"])
app.include_router(system.router, prefix="/api/system", tags=["System"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "name": "Raster Toolkit",
        "status": "running",
        "version": APIConstants.API_VERSION,
        "endpoints": {
            "transform": "/api/transform",
            "color": "/api/color",
            "system": "/api/system",
            "docs": "/docs",
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "services": {
            "image_tool_service": getattr(app.state, "image_tool_service", None) is not None,
        },
    }


# Errors raised outside the toolkit
@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "type": type(exc).__name__},
    )


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        log_level=settings.system.log_level.lower(),
    )
