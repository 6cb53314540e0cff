"""Operator notification channels."""

from .notifier import OperatorNotifier
from .smtp import SMTPSender
from .webhook import WebhookSender

__all__ = ["OperatorNotifier", "SMTPSender", "WebhookSender"]
