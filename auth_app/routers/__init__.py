"""
Auth service API routers.
"""

from auth_app.routers.auth import router as auth_router
from auth_app.routers.user import router as user_router

__all__ = [
    "auth_router",
    "user_router",
]
