"""
API Routers for the raster toolkit
"""

from . import color, system, transform

__all__ = ["transform", "color", "system"]
