"""
API Routers module.
"""
from tupplur.routers import api, collections, health

__all__ = ["api", "collections", "health"]
