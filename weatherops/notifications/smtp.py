"""SMTP notification sender — operator alert emails."""

import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from ..utils.logging import get_logger

logger = get_logger("notifications.smtp")

_EMAIL_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>
body {{
    margin: 0;
    padding: 0;
    background-color: #f4f6f8;
    color: #1f2933;
    font-family: 'Segoe UI', Helvetica, Arial, sans-serif;
}}
.container {{
    max-width: 600px;
    margin: 0 auto;
    padding: 20px;
}}
.header {{
    background-color: #0b3d91;
    padding: 16px 20px;
    color: #ffffff;
    font-size: 16px;
    letter-spacing: 1px;
}}
.body-content {{
    background-color: #ffffff;
    border: 1px solid #d9e2ec;
    border-top: none;
    padding: 24px;
    line-height: 1.6;
}}
.footer {{
    padding: 12px;
    text-align: center;
    font-size: 11px;
    color: #7b8794;
}}
</style>
</head>
<body>
<div class="container">
    <div class="header">WeatherOps Console &mdash; {subject}</div>
    <div class="body-content">
        {body}
    </div>
    <div class="footer">Automated notification from the WeatherOps system monitor. Do not reply.</div>
</div>
</body>
</html>"""


class SMTPSender:
    """Sends HTML email notifications via SMTP.

    The actual SMTP send is run in a thread executor to avoid blocking
    the async event loop.
    """

    async def send(self, config: dict, subject: str, body_html: str, to: str) -> bool:
        """Send an HTML email via SMTP.

        Args:
            config: SMTP configuration dictionary with keys:
                - host: SMTP server hostname
                - port: SMTP server port
                - username: SMTP auth username
                - password: SMTP auth password
                - from_addr: Sender email address
                - use_ssl: Implicit TLS (SMTPS) instead of STARTTLS
            subject: Email subject line.
            body_html: HTML content for the email body.
            to: Recipient email address.

        Returns:
            True if the email was sent successfully, False otherwise.
        """
        host = config.get("host", "")
        port = config.get("port", 465)
        username = config.get("username", "")
        password = config.get("password", "")
        from_addr = config.get("from_addr") or username
        use_ssl = config.get("use_ssl", True)

        if not host or not to:
            logger.error("smtp_missing_config", host=host, to=to)
            return False

        full_html = _EMAIL_TEMPLATE.format(subject=subject, body=body_html)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(
                None,
                self._send_sync,
                host,
                port,
                username,
                password,
                from_addr,
                to,
                subject,
                full_html,
                use_ssl,
            )
            logger.info("smtp_email_sent", to=to, subject=subject)
            return True
        except Exception as exc:
            logger.error("smtp_send_error", to=to, error=str(exc))
            return False

    @staticmethod
    def _send_sync(
        host: str,
        port: int,
        username: str,
        password: str,
        from_addr: str,
        to: str,
        subject: str,
        html_body: str,
        use_ssl: bool,
    ) -> None:
        """Synchronous SMTP send — executed in a thread pool."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = from_addr
        msg["To"] = to
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        if use_ssl:
            server = smtplib.SMTP_SSL(host, port, timeout=30)
        else:
            server = smtplib.SMTP(host, port, timeout=30)
        with server:
            server.ehlo()
            if not use_ssl and port != 25:
                server.starttls()
                server.ehlo()
            if username and password:
                server.login(username, password)
            server.sendmail(from_addr, [to], msg.as_string())
