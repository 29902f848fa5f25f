"""
API routers.
"""

from feedkeeper.routers.admin import router as admin_router
from feedkeeper.routers.entries import router as entries_router

__all__ = [
    "admin_router",
    "entries_router",
]
