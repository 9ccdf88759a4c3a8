"""Transactional email sent through Resend.

Messages are rendered here and handed to the Resend SDK on a small worker
pool so a slow provider can't hold a request worker past the configured
timeout. Without an API key, messages are logged instead of sent.
"""

import html
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from urllib.parse import urlencode

import resend

from src.apex.core.config import get_settings
from src.apex.core.logging import get_logger

logger = get_logger(__name__)

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="apex_email")

_ACCENT = "#0f766e"

_PASSWORD_RESET_HTML = """<!DOCTYPE html>
<html>
<body style="font-family: Arial, Helvetica, sans-serif; color: #1f2937; max-width: 560px; \
margin: 0 auto; padding: 24px;">
  <h2 style="color: {accent};">{app_name}: password reset</h2>
  <p>Hello {name},</p>
  <p>A password reset was requested for your APEX account. The link below is valid
  for {minutes} minutes and can be used once.</p>
  <p><a href="{url}" style="background: {accent}; color: #fff; padding: 10px 20px; \
border-radius: 4px; text-decoration: none;">Choose a new password</a></p>
  <p style="font-size: 13px; color: #6b7280;">Link not working? Paste this into your
  browser:<br>{url}</p>
  <p style="font-size: 13px; color: #6b7280;">If you did not request this, ignore this
  message and your password stays the same.</p>
</body>
</html>"""

_PASSWORD_RESET_TEXT = """Hello {name},

A password reset was requested for your APEX account. Open the link below
within {minutes} minutes to choose a new password:

{url}

If you did not request this, ignore this message and your password stays the same.
"""


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str
    text: str
    kind: str


def password_reset_url(email: str, token: str) -> str:
    settings = get_settings()
    return f"{settings.app_url}/reset-password?{urlencode({'token': token, 'email': email})}"


def build_password_reset_email(to: str, token: str, user_name: str) -> EmailMessage:
    """Render the reset message. The plaintext token only ever leaves in this link."""
    settings = get_settings()
    url = password_reset_url(to, token)
    minutes = settings.password_reset_expire_minutes
    return EmailMessage(
        to=to,
        subject=f"Reset your {settings.app_name} password",
        html=_PASSWORD_RESET_HTML.format(
            accent=_ACCENT,
            app_name=html.escape(settings.app_name),
            name=html.escape(user_name),
            minutes=minutes,
            url=html.escape(url),
        ),
        text=_PASSWORD_RESET_TEXT.format(name=user_name, minutes=minutes, url=url),
        kind="password_reset",
    )


def send_email(message: EmailMessage) -> bool:
    """Deliver a message; returns False if Resend failed or timed out."""
    settings = get_settings()
    if not settings.resend_api_key:
        logger.warning(
            "Email delivery disabled, RESEND_API_KEY not set",
            to=message.to,
            email_type=message.kind,
        )
        return True

    resend.api_key = settings.resend_api_key
    params: resend.Emails.SendParams = {
        "from": settings.email_from,
        "to": [message.to],
        "subject": message.subject,
        "html": message.html,
        "text": message.text,
    }
    timeout = settings.email_send_timeout_seconds
    try:
        _executor.submit(resend.Emails.send, params).result(timeout=timeout)
    except FuturesTimeoutError:
        logger.error(
            "Email send timed out", to=message.to, email_type=message.kind, timeout=timeout
        )
        return False
    except Exception as e:
        logger.error("Email send failed", to=message.to, email_type=message.kind, error=str(e))
        return False
    logger.info("Email sent", to=message.to, email_type=message.kind)
    return True


def send_password_reset_email(to: str, token: str, user_name: str) -> bool:
    return send_email(build_password_reset_email(to, token, user_name))
