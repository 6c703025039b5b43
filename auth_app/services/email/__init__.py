"""Email services."""

from auth_app.services.email.email_service import EmailService

__all__ = ["EmailService"]
