"""Notification modules."""
from .webhook import WebhookEventRelay

__all__ = ["WebhookEventRelay"]
