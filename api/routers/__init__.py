"""
API Routers for Thumbsmith
"""

from . import image, system

__all__ = ["image", "system"]
