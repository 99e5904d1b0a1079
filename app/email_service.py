import logging
import smtplib
from email.message import EmailMessage

from app import config

logger = logging.getLogger(__name__)


def send_email(to_email: str, subject: str, body: str) -> bool:
    """Send a plain-text email over SMTP.

    Returns False without sending when SMTP is not configured. Transport
    failures raise so the caller can retry.
    """
    from_email = config.SMTP_FROM_EMAIL or config.SMTP_USERNAME
    if not config.SMTP_HOST or not from_email:
        logger.info(f"Email not configured, skipping '{subject}' to {to_email}")
        return False

    msg = EmailMessage()
    msg["From"] = from_email
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(body)

    with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=10) as server:
        if config.SMTP_USE_TLS:
            server.starttls()
        if config.SMTP_USERNAME and config.SMTP_PASSWORD:
            server.login(config.SMTP_USERNAME, config.SMTP_PASSWORD)
        server.send_message(msg)
    return True
