"""User services."""

from auth_app.services.user.user_service import UserService

__all__ = ["UserService"]
