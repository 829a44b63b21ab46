"""Tests for email templates and SMTP delivery."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from core.exceptions import NotificationFailure
from core.integrations.email import (
    EmailService,
    EmailTemplate,
    EmailTemplates,
    render_template,
)


def test_application_received_template():
    html = render_template(
        EmailTemplate.APPLICATION_RECEIVED,
        {"candidate_name": "Alice", "position": "Backend Engineer", "company_name": "Acme"},
    )
    assert "Dear Alice" in html
    assert "Backend Engineer" in html
    assert "Acme" in html


@pytest.mark.parametrize("status,phrase", [
    ("APPROVED", "has been approved"),
    ("REJECTED", "move forward with other candidates"),
    ("PENDING", "under review again"),
])
def test_status_update_wording_depends_on_status(status, phrase):
    html = EmailTemplates.status_update("Alice", "Backend Engineer", "Acme", status)
    assert phrase in html


def test_render_escapes_context():
    html = render_template(
        EmailTemplate.CUSTOM,
        {"body": "<script>alert(1)</script>", "company_name": "Acme & Co"},
    )
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "Acme &amp; Co" in html


def test_custom_template_splits_paragraphs():
    html = EmailTemplates.custom("First line\n\nSecond line", "Acme")
    assert "<p>First line</p>" in html
    assert "<p>Second line</p>" in html


def test_render_with_missing_context_raises_notification_failure():
    with pytest.raises(NotificationFailure):
        render_template(EmailTemplate.STATUS_UPDATE, {"candidate_name": "Alice"})


def _service():
    return EmailService(
        smtp_host="smtp.test",
        smtp_port=587,
        smtp_user="user",
        smtp_password="pass",
        from_email="noreply@acme.test",
        from_name="Acme Hiring",
    )


def test_send_email_includes_cc_recipients():
    with patch("core.integrations.email.smtplib.SMTP") as mock_smtp:
        server = mock_smtp.return_value.__enter__.return_value
        assert _service().send_email(
            "alice@example.com", "Hello", "<p>hi</p>", cc=["hr@acme.test", None, "jobs@acme.test"]
        )

    server.starttls.assert_called_once()
    server.login.assert_called_once_with("user", "pass")
    kwargs = server.send_message.call_args.kwargs
    assert kwargs["to_addrs"] == ["alice@example.com", "hr@acme.test", "jobs@acme.test"]
    message = server.send_message.call_args.args[0]
    assert message["Cc"] == "hr@acme.test, jobs@acme.test"
    assert message["From"] == "Acme Hiring <noreply@acme.test>"


def test_send_email_smtp_error_raises_notification_failure():
    with patch("core.integrations.email.smtplib.SMTP") as mock_smtp:
        mock_smtp.side_effect = smtplib.SMTPConnectError(421, b"unavailable")
        with pytest.raises(NotificationFailure):
            _service().send_email("alice@example.com", "Hello", "<p>hi</p>")


@pytest.mark.asyncio
async def test_send_renders_and_delivers():
    service = _service()
    with patch.object(EmailService, "send_email", MagicMock(return_value=True)) as mock_send:
        result = await service.send(
            to="alice@example.com",
            subject="Application Received",
            template=EmailTemplate.APPLICATION_RECEIVED,
            context={"candidate_name": "Alice", "position": "Engineer", "company_name": "Acme"},
            cc=["hr@acme.test"],
        )

    assert result is True
    to, subject, body, cc = mock_send.call_args.args
    assert to == "alice@example.com"
    assert "Dear Alice" in body
    assert cc == ["hr@acme.test"]
