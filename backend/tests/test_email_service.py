"""Tests for owner notification emails."""

import smtplib
from unittest.mock import patch

from potbot.models import NotificationType
from potbot.services import EmailService


def make_service():
    return EmailService(
        from_email="potbot@example.com",
        password="app-password",
        smtp_host="smtp.example.com",
        smtp_port=587,
    )


def test_fallen_has_dedicated_message():
    subject, body = EmailService.format_plant_notification("plant_00042", "FALLEN")

    assert subject == "Your plant has fallen over"
    assert "plant_00042" in body
    assert "fallen over" in body


def test_other_types_get_generic_message():
    subject, body = EmailService.format_plant_notification("plant_00042", "THIRSTY")

    assert subject == "Potbot notification for plant_00042"
    assert body == "Your plant (ID: plant_00042) sent notification: THIRSTY"


def test_send_uses_starttls_and_login():
    service = make_service()

    with patch("potbot.services.email_service.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value

        assert service.send_plant_notification("ada@example.com", "plant_00042", "FALLEN") is True

    smtp_cls.assert_called_once_with("smtp.example.com", 587)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("potbot@example.com", "app-password")
    msg = server.send_message.call_args.args[0]
    assert msg["To"] == "ada@example.com"
    assert msg["From"] == "potbot@example.com"
    assert msg["Subject"] == "Your plant has fallen over"


def test_smtp_failure_returns_false():
    service = make_service()

    with patch("potbot.services.email_service.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad login")

        assert service.send_plant_notification("ada@example.com", "plant_00042", "FALLEN") is False


def test_unconfigured_service_does_not_send():
    service = EmailService(from_email="", password="", smtp_host="")

    with patch("potbot.services.email_service.smtplib.SMTP") as smtp_cls:
        assert service.send_plant_notification("ada@example.com", "plant_00042", "FALLEN") is False

    smtp_cls.assert_not_called()


def test_fallen_enum_and_string_agree():
    from_enum = EmailService.format_plant_notification("plant_00042", NotificationType.FALLEN)
    from_string = EmailService.format_plant_notification("plant_00042", "FALLEN")

    assert from_enum == from_string
    assert from_enum[0] == "Your plant has fallen over"
