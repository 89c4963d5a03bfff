"""Email sending via Resend API.

Simple HTTP POST to Resend for login code and sign-in notification emails.
Delivery failures are logged and reported to the caller as ``False``; they
never raise.
"""

import logging
from datetime import timedelta
from html import escape

import httpx

from codenote.core.config import settings

logger = logging.getLogger(__name__)

_RESEND_API_URL = "https://api.resend.com/emails"
_RESEND_TIMEOUT = 10.0


async def send_email(*, to: str, subject: str, text: str, html: str) -> bool:
    """Send a single email.

    Args:
        to: Recipient email address.
        subject: Subject line.
        text: Plain-text body.
        html: HTML body.

    Returns:
        True if the provider accepted the message, False otherwise.
    """
    try:
        async with httpx.AsyncClient() as client:
            resp = await client.post(
                _RESEND_API_URL,
                headers={
                    "Authorization": f"Bearer {settings.resend_api_key.get_secret_value()}",
                },
                json={
                    "from": settings.email_from,
                    "to": to,
                    "subject": subject,
                    "text": text,
                    "html": html,
                },
                timeout=_RESEND_TIMEOUT,
            )
            resp.raise_for_status()
    except Exception:
        logger.warning("Failed to send email", exc_info=True)
        return False
    return True


async def send_login_code_email(*, to_email: str, code: str, ttl: timedelta) -> bool:
    """Send a one-time login code.

    Args:
        to_email: Recipient email address.
        code: Plain 6-digit code (only ever leaves the server here).
        ttl: How long the code stays valid, quoted in the message.

    Returns:
        True if the email was accepted for delivery.
    """
    minutes = int(ttl.total_seconds() // 60)
    return await send_email(
        to=to_email,
        subject="Your sign-in code",
        text=f"Your code: {code}\nValid for {minutes} minutes.",
        html=(
            f"<p>Your code: <b>{escape(code)}</b></p>"
            f"<p>Valid for {minutes} minutes.</p>"
        ),
    )


async def send_login_success_email(*, to_email: str) -> None:
    """Notify a user that their account was just signed in to.

    Best-effort: runs as a background task after the response is sent.
    """
    await send_email(
        to=to_email,
        subject="Successful sign-in",
        text=f"You signed in as {to_email}.",
        html="<p>You have signed in to the app.</p>",
    )
