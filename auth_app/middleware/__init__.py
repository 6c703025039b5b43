"""
Auth service middleware.
"""

from auth_app.middleware.auth import AuthGuard, AuthContext

__all__ = [
    "AuthGuard",
    "AuthContext",
]
