"""Tests for SMTPSender — executor-backed SMTP delivery."""

from unittest.mock import MagicMock, patch

import pytest

from weatherops.notifications.smtp import SMTPSender

SMTP_CONFIG = {
    "host": "smtp.example.com",
    "port": 465,
    "username": "monitor",
    "password": "secret",
    "from_addr": "monitor@example.com",
    "use_ssl": True,
}


class TestSend:
    @pytest.mark.asyncio
    async def test_missing_host_is_not_sent(self):
        sender = SMTPSender()
        with patch.object(SMTPSender, "_send_sync") as send_sync:
            result = await sender.send(dict(SMTP_CONFIG, host=""), "subj", "<p>x</p>", "ops@example.com")
        assert result is False
        send_sync.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_recipient_is_not_sent(self):
        result = await SMTPSender().send(SMTP_CONFIG, "subj", "<p>x</p>", "")
        assert result is False

    @pytest.mark.asyncio
    async def test_success_wraps_body_in_template(self):
        with patch.object(SMTPSender, "_send_sync") as send_sync:
            result = await SMTPSender().send(SMTP_CONFIG, "Alert", "<p>cpu high</p>", "ops@example.com")

        assert result is True
        args = send_sync.call_args[0]
        assert args[0] == "smtp.example.com"
        assert args[5] == "ops@example.com"
        assert "<p>cpu high</p>" in args[7]
        assert "WeatherOps Console" in args[7]

    @pytest.mark.asyncio
    async def test_smtp_error_returns_false(self):
        with patch.object(SMTPSender, "_send_sync", side_effect=OSError("connection refused")):
            result = await SMTPSender().send(SMTP_CONFIG, "Alert", "<p>x</p>", "ops@example.com")
        assert result is False


class TestSendSync:
    def test_ssl_connection_logs_in_and_sends(self):
        with patch("weatherops.notifications.smtp.smtplib.SMTP_SSL") as MockSSL:
            server = MagicMock()
            server.__enter__.return_value = server
            MockSSL.return_value = server

            SMTPSender._send_sync(
                "smtp.example.com", 465, "monitor", "secret",
                "monitor@example.com", "ops@example.com", "Alert", "<p>x</p>", True,
            )

        MockSSL.assert_called_once_with("smtp.example.com", 465, timeout=30)
        server.login.assert_called_once_with("monitor", "secret")
        server.sendmail.assert_called_once()
        server.starttls.assert_not_called()

    def test_plain_connection_upgrades_with_starttls(self):
        with patch("weatherops.notifications.smtp.smtplib.SMTP") as MockSMTP:
            server = MagicMock()
            server.__enter__.return_value = server
            MockSMTP.return_value = server

            SMTPSender._send_sync(
                "smtp.example.com", 587, "", "",
                "monitor@example.com", "ops@example.com", "Alert", "<p>x</p>", False,
            )

        server.starttls.assert_called_once()
        server.login.assert_not_called()
