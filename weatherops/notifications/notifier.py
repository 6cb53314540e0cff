"""Operator notifier — delivers critical-alert summaries to the on-call operator."""

import html

from ..config import WeatherOpsConfig
from ..contracts import Alert
from ..utils.clock import Clock, utc_now
from ..utils.logging import get_logger
from ..utils.outcome import Outcome
from .smtp import SMTPSender
from .webhook import WebhookSender

logger = get_logger("notifications.notifier")

SUBJECT = "[WEATHEROPS] [CRITICAL] System anomaly detected"


class OperatorNotifier:
    """Sends one message per evaluation to the fixed operator destination.

    Email goes to ``admin_email`` when SMTP is configured; the webhook is an
    optional second channel. Delivery succeeds if any configured channel
    accepted the message. Nothing is retried.
    """

    def __init__(
        self,
        config: WeatherOpsConfig,
        smtp_sender: SMTPSender | None = None,
        webhook_sender: WebhookSender | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._config = config
        self._smtp_sender = smtp_sender or SMTPSender()
        self._webhook_sender = webhook_sender or WebhookSender()
        self._clock = clock

    @property
    def _smtp_configured(self) -> bool:
        return bool(self._config.smtp_host and self._config.admin_email)

    async def notify_critical(self, alerts: list[Alert]) -> Outcome[None]:
        """Notify about critical alerts. Never raises."""
        if not self._smtp_configured and not self._config.alert_webhook_url:
            return Outcome.failure("no notification channel configured")

        timestamp = self._clock().isoformat()
        failures = []
        delivered = False

        if self._smtp_configured:
            sent = await self._smtp_sender.send(
                self._smtp_config(),
                SUBJECT,
                self._build_email_body(alerts, timestamp),
                self._config.admin_email,
            )
            if sent:
                delivered = True
            else:
                failures.append(f"email delivery to {self._config.admin_email} failed")

        if self._config.alert_webhook_url:
            sent = await self._webhook_sender.send(
                self._config.alert_webhook_url,
                {
                    "event_type": "anomaly_critical",
                    "severity": "critical",
                    "title": "System anomaly detected",
                    "alerts": [a.model_dump() for a in alerts],
                    "timestamp": timestamp,
                },
            )
            if sent:
                delivered = True
            else:
                failures.append("webhook delivery failed")

        if delivered:
            logger.info("operator_notified", alert_count=len(alerts))
            return Outcome.success()
        return Outcome.failure("; ".join(failures))

    def _smtp_config(self) -> dict:
        return {
            "host": self._config.smtp_host,
            "port": self._config.smtp_port,
            "username": self._config.smtp_username,
            "password": self._config.smtp_password,
            "from_addr": self._config.smtp_from,
            "use_ssl": self._config.smtp_use_ssl,
        }

    @staticmethod
    def _build_email_body(alerts: list[Alert], timestamp: str) -> str:
        items = "".join(f"<li>{html.escape(a.message)}</li>" for a in alerts)
        return (
            "<p>The system monitor detected critical conditions:</p>"
            f"<ul>{items}</ul>"
            f"<p style='color: #7b8794;'>Detected at {timestamp}</p>"
        )
