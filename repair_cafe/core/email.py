# repair_cafe/core/email.py
"""
Email transport using Resend.

Without a configured API key every message is written to the log instead of
being sent, so local development never needs mail credentials.
"""
import logging

import resend

from repair_cafe.core.config import settings

logger = logging.getLogger(__name__)


def init_resend():
    """Initialize Resend with API key."""
    resend.api_key = settings.RESEND_API_KEY


def send_email(to_email: str, subject: str, text: str, html: str) -> dict:
    """
    Send a single transactional email.

    Args:
        to_email: Recipient email address
        subject: Subject line
        text: Plain-text body
        html: HTML body

    Returns:
        {"success": True, "id": ...} or {"success": False, "error": ...}
    """
    if not settings.email_enabled:
        logger.info(f"[DEV] Email to {to_email}: {subject}")
        logger.info(f"[DEV] {text}")
        return {"success": True, "id": None}

    init_resend()
    params = {
        "from": f"{settings.EMAIL_FROM_NAME} <noreply@{settings.RESEND_FROM_DOMAIN}>",
        "to": [to_email],
        "subject": subject,
        "text": text,
        "html": html,
    }

    try:
        response = resend.Emails.send(params)
        logger.info(f"[EMAIL] '{subject}' sent to {to_email}")
        return {"success": True, "id": response.get("id")}
    except Exception as e:
        logger.error(f"[EMAIL ERROR] Failed to send email to {to_email}: {e}")
        return {"success": False, "error": str(e)}
