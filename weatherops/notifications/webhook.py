"""Webhook notification sender — supports generic, Slack, and Discord formats."""

import httpx

from ..utils.logging import get_logger

logger = get_logger("notifications.webhook")


class WebhookSender:
    """Sends notifications via HTTP webhooks.

    Auto-detects Slack and Discord webhook URLs and formats the payload
    accordingly. Falls back to raw JSON POST for generic webhooks.
    """

    async def send(
        self, url: str, payload: dict, headers: dict | None = None
    ) -> bool:
        """Send a notification payload to a webhook URL.

        Returns:
            True if the webhook responded successfully, False otherwise.
        """
        send_headers = {"Content-Type": "application/json"}
        if headers:
            send_headers.update(headers)

        body = self._format_payload(url, payload)

        try:
            async with httpx.AsyncClient(timeout=30) as client:
                response = await client.post(url, json=body, headers=send_headers)
                response.raise_for_status()
                logger.info("webhook_sent", url=url, status=response.status_code)
                return True
        except httpx.HTTPStatusError as exc:
            logger.error(
                "webhook_http_error",
                url=url,
                status=exc.response.status_code,
                body=exc.response.text[:500],
            )
            return False
        except Exception as exc:
            logger.error("webhook_send_error", url=url, error=str(exc))
            return False

    def _format_payload(self, url: str, payload: dict) -> dict:
        message = self._build_message_text(payload)

        if "hooks.slack.com" in url:
            return {"text": message}

        if "discord.com" in url:
            return {"content": message}

        return {
            "text": message,
            **payload,
        }

    def _build_message_text(self, payload: dict) -> str:
        """Build a human-readable message string from the notification payload."""
        severity = payload.get("severity", "critical")
        title = payload.get("title", "System anomaly detected")
        alerts = payload.get("alerts", [])
        timestamp = payload.get("timestamp", "")

        parts = [f"[WEATHEROPS] {severity.upper()}: {title}"]
        for alert in alerts:
            parts.append(f"- {alert.get('message', '')}")
        if timestamp:
            parts.append(f"Time: {timestamp}")

        return "\n".join(parts)
