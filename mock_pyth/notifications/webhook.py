"""Webhook relay for emitted oracle events."""
import logging
import ssl
from collections.abc import Sequence

import aiohttp
import certifi

from ..config import WebhookConfig
from ..events import OracleEvent, event_to_dict

logger = logging.getLogger(__name__)


class WebhookEventRelay:
    """POST batches of oracle events as JSON to a configured URL."""

    def __init__(self, config: WebhookConfig) -> None:
        self.url = config.url
        self.timeout = config.timeout

    async def publish(self, events: Sequence[OracleEvent]) -> bool:
        """Send ``events``; returns False (after logging) on any failure."""
        if not self.url:
            logger.warning("Webhook url not configured")
            return False
        if not events:
            return True

        payload = {"events": [event_to_dict(e) for e in events]}

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with aiohttp.ClientSession(
                connector=connector, timeout=timeout
            ) as session:
                async with session.post(self.url, json=payload) as response:
                    if response.status != 200:
                        logger.error(
                            "Failed to relay events to webhook: HTTP %s",
                            response.status,
                        )
                        return False
        except Exception as e:
            logger.error("Error relaying events to webhook: %s", e)
            return False

        logger.info("Relayed %d events to webhook", len(events))
        return True
