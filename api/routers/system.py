"""
System API Router - Status and configuration
"""

import logging
import time
from datetime import datetime

import cv2
import numpy as np
import PIL
import psutil
from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.exceptions import safe_endpoint

logger = logging.getLogger(__name__)

router = APIRouter()

# Track start time
START_TIME = time.time()


class SystemStatus(BaseModel):
    """Process status and imaging library versions"""

    status: str
    uptime: float
    memory_usage: dict
    cpu_percent: float
    libraries: dict


@router.get("/status")
@safe_endpoint
async def get_status() -> SystemStatus:
    """Get system status"""
    process = psutil.Process()
    memory_info = process.memory_info()
    virtual_memory = psutil.virtual_memory()

    return SystemStatus(
        status="healthy",
        uptime=time.time() - START_TIME,
        memory_usage={
            "process_mb": memory_info.rss / 1024 / 1024,
            "system_percent": virtual_memory.percent,
            "available_mb": virtual_memory.available / 1024 / 1024,
        },
        cpu_percent=process.cpu_percent(interval=None),
        libraries={
            "numpy": np.__version__,
            "opencv": cv2.__version__,
            "pillow": PIL.__version__,
        },
    )


@router.get("/config")
@safe_endpoint
async def get_config(request: Request) -> dict:
    """Get current configuration"""
    return request.app.state.config


@router.get("/health")
async def health_check() -> dict:
    """Simple health check"""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}
