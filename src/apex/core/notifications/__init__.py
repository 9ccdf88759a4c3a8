"""Outbound notifications."""

from src.apex.core.notifications.email import send_password_reset_email

__all__ = ["send_password_reset_email"]
