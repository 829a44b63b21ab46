"""Email integration utilities for sending emails."""

import asyncio
import html
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from enum import Enum
from typing import Any, Optional, List
import logging

from core.config import Settings
from core.exceptions import NotificationFailure

logger = logging.getLogger(__name__)


class EmailTemplate(str, Enum):
    """Named message templates."""

    APPLICATION_RECEIVED = "application_received"
    STATUS_UPDATE = "status_update"
    CUSTOM = "custom"


class EmailService:
    """Email service for sending templated emails via SMTP."""

    def __init__(
        self,
        smtp_host: str = "localhost",
        smtp_port: int = 587,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: str = "noreply@example.com",
        from_name: str = "Hiring Team",
        use_tls: bool = True,
    ):
        """
        Initialize email service.

        Args:
            smtp_host: SMTP server host
            smtp_port: SMTP server port
            smtp_user: SMTP username
            smtp_password: SMTP password
            from_email: Default sender email
            from_name: Default sender name
            use_tls: Whether to upgrade the connection with STARTTLS
        """
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.from_email = from_email
        self.from_name = from_name
        self.use_tls = use_tls

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailService":
        return cls(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=settings.smtp_password,
            from_email=settings.from_email,
            from_name=settings.from_name,
            use_tls=settings.smtp_use_tls,
        )

    async def send(
        self,
        to: str,
        subject: str,
        template: EmailTemplate,
        context: dict[str, Any],
        cc: Optional[List[str]] = None,
    ) -> bool:
        """
        Render a template and send it without blocking the event loop.

        Args:
            to: Recipient email address
            subject: Email subject
            template: Template to render
            context: Template context variables
            cc: CC recipients

        Returns:
            True once the SMTP server accepted the message

        Raises:
            NotificationFailure: If rendering or delivery fails
        """
        body = render_template(template, context)
        return await asyncio.to_thread(self.send_email, to, subject, body, cc)

    def send_email(
        self,
        to_email: str,
        subject: str,
        body: str,
        cc: Optional[List[str]] = None,
    ) -> bool:
        """
        Send an HTML email.

        Args:
            to_email: Recipient email address
            subject: Email subject
            body: HTML body
            cc: CC recipients

        Returns:
            True if email sent successfully
        """
        msg = MIMEMultipart()
        msg['From'] = f"{self.from_name} <{self.from_email}>"
        msg['To'] = to_email
        msg['Subject'] = subject

        recipients = [to_email]
        cc = [address for address in (cc or []) if address]
        if cc:
            msg['Cc'] = ", ".join(cc)
            recipients.extend(cc)

        msg.attach(MIMEText(body, 'html'))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
                if self.use_tls:
                    server.starttls()
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg, from_addr=self.from_email, to_addrs=recipients)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationFailure(f"Failed to send email: {e}") from e

        logger.info(f"Email sent: {subject}")
        return True


def render_template(template: EmailTemplate, context: dict[str, Any]) -> str:
    """Render a named template with HTML-escaped context values."""
    safe = {key: html.escape(str(value)) if value is not None else "" for key, value in context.items()}
    try:
        if template == EmailTemplate.APPLICATION_RECEIVED:
            return EmailTemplates.application_received(**safe)
        if template == EmailTemplate.STATUS_UPDATE:
            return EmailTemplates.status_update(**safe)
        if template == EmailTemplate.CUSTOM:
            return EmailTemplates.custom(**safe)
    except TypeError as e:
        raise NotificationFailure(f"Bad context for template {template.value}: {e}") from e
    raise NotificationFailure(f"Unknown email template: {template}")


class EmailTemplates:
    """Pre-configured email templates."""

    @staticmethod
    def application_received(candidate_name: str, position: str, company_name: str) -> str:
        """Application received confirmation email."""
        return f"""
            <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2>Application Received</h2>
                <p>Dear {candidate_name},</p>
                <p>Thank you for applying to the <strong>{position}</strong> position at <strong>{company_name}</strong>.</p>
                <p>We have received your application and our team will review it shortly.
                You will hear from us within 3-5 business days.</p>
                <p>Best regards,<br><strong>{company_name}</strong> Hiring Team</p>
                <p style="font-size: 12px; color: #9ca3af;">This is an automated message. Please do not reply to this email.</p>
            </div>
        """

    @staticmethod
    def status_update(candidate_name: str, position: str, company_name: str, status: str) -> str:
        """Status change email; the wording depends on the new status."""
        if status == "APPROVED":
            message = f"""
                <p>We're pleased to inform you that your application for the <strong>{position}</strong>
                position has been approved!</p>
                <p>Our team will contact you within 1-2 business days to schedule an interview.</p>
            """
        elif status == "REJECTED":
            message = f"""
                <p>Thank you for your interest in the <strong>{position}</strong> position at
                <strong>{company_name}</strong>.</p>
                <p>After careful review, we have decided to move forward with other candidates whose
                experience more closely matches our current needs. We encourage you to apply for
                future openings that match your skills and experience.</p>
            """
        else:
            message = f"""
                <p>Your application for the <strong>{position}</strong> position is under review again.
                We'll be in touch once we have an update.</p>
            """

        return f"""
            <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2>Application Update</h2>
                <p>Dear {candidate_name},</p>
                {message}
                <p>Best regards,<br><strong>{company_name}</strong> Hiring Team</p>
            </div>
        """

    @staticmethod
    def custom(body: str, company_name: str) -> str:
        """Free-form message written by a reviewer."""
        paragraphs = "".join(f"<p>{para}</p>" for para in body.split("\n") if para.strip())
        return f"""
            <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                {paragraphs}
                <p style="margin-top: 30px;">Best regards,<br><strong>{company_name}</strong> Team</p>
                <p style="font-size: 12px; color: #9ca3af;">This email was sent from {company_name}'s ATS system.</p>
            </div>
        """
