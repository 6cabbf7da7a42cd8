"""
API route modules.
"""

from routes.admin import router as admin_router

__all__ = [
    "admin_router",
]
