import logging
from datetime import datetime
from email.message import EmailMessage
from html import escape

import aiosmtplib

from devexchange.core.config import settings
from devexchange.core.errors import EmailSendError

logger = logging.getLogger(__name__)


async def send_email(to_email: str, subject: str, html_body: str):
    if not settings.MAIL_FROM:
        raise EmailSendError("Email sending is not configured")

    message = EmailMessage()
    message["From"] = settings.MAIL_FROM
    message["To"] = to_email
    message["Subject"] = subject
    message.set_content("This message requires an HTML capable mail client.")
    message.add_alternative(html_body, subtype="html")

    try:
        await aiosmtplib.send(
            message,
            hostname=settings.MAIL_HOST,
            port=settings.MAIL_PORT,
            start_tls=True,
            username=settings.MAIL_FROM,
            password=settings.MAIL_PASSWORD,
        )
    except (aiosmtplib.SMTPException, OSError) as exc:
        logger.error("Failed to send '%s' to %s: %s", subject, to_email, exc)
        raise EmailSendError(f"Failed to send email: {exc}") from exc
    logger.info("Sent '%s' to %s", subject, to_email)


def verification_email(user_name: str, feature: str, link: str) -> str:
    return f"""
        <h2>Verify Your {feature}</h2>
        <p>Dear {escape(user_name)},</p>
        <p>To complete your {feature} verification, please click the link below:</p>
        <p><a href="{escape(link)}">Verify {feature}</a></p>
        <p>This link will expire in {settings.VERIFICATION_TOKEN_TTL_HOURS} hours.</p>
        <p>If you did not request this verification, please ignore this email.</p>
        <p>Best regards,<br>The DevExchange Team</p>"""


def submission_confirmation_email(user_name: str, title: str, link: str) -> str:
    return f"""
        <h2>Website Connection Submission Received</h2>
        <p>Dear {escape(user_name)},</p>
        <p>Thank you for submitting your website connection. Our team will review it shortly.</p>
        <ul>
            <li>Website Title: {escape(title)}</li>
            <li>Website Link: {escape(link)}</li>
            <li>Submission Date: {datetime.utcnow():%B %d, %Y}</li>
        </ul>
        <p>Best regards,<br>The DevExchange Team</p>"""


def approval_email(user_name: str, title: str, link: str) -> str:
    return f"""
        <h2>Website Connection Approved</h2>
        <p>Dear {escape(user_name)},</p>
        <p>Your website connection has been approved and is now visible on DevExchange.</p>
        <ul>
            <li>Website Title: {escape(title)}</li>
            <li>Website Link: {escape(link)}</li>
            <li>Approval Date: {datetime.utcnow():%B %d, %Y}</li>
        </ul>
        <p>Best regards,<br>The DevExchange Team</p>"""


def removal_email(user_name: str, title: str) -> str:
    return f"""
        <h2>Website Connection Removed</h2>
        <p>Dear {escape(user_name)},</p>
        <p>Your website connection has been removed from DevExchange.</p>
        <ul>
            <li>Website Title: {escape(title)}</li>
            <li>Removal Date: {datetime.utcnow():%B %d, %Y}</li>
        </ul>
        <p>If you have any questions about this decision, please contact our support team.</p>
        <p>Best regards,<br>The DevExchange Team</p>"""
