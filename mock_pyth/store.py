"""In-memory price feed storage with freshness-wins updates."""
from __future__ import annotations

import logging
from collections.abc import Iterable

from .errors import PriceFeedNotFound, PriceFeedNotFoundWithinRange
from .models import PriceFeed, format_price_id

logger = logging.getLogger(__name__)


class PriceStore:
    """Latest accepted price feed per asset identifier.

    Presence is tracked by mapping membership, so a feed whose id is all zero
    bytes is stored and reported like any other. Entries are never deleted.
    """

    def __init__(self) -> None:
        self._feeds: dict[bytes, PriceFeed] = {}

    def __len__(self) -> int:
        return len(self._feeds)

    def exists(self, price_id: bytes) -> bool:
        return price_id in self._feeds

    def get(self, price_id: bytes) -> PriceFeed | None:
        return self._feeds.get(price_id)

    def query(self, price_id: bytes) -> PriceFeed:
        feed = self._feeds.get(price_id)
        if feed is None:
            raise PriceFeedNotFound(price_id)
        return feed

    def last_publish_time(self, price_id: bytes) -> int:
        """Publish time of the stored current price, 0 when absent."""
        feed = self._feeds.get(price_id)
        return feed.price.publish_time if feed is not None else 0

    def apply(self, update: PriceFeed) -> tuple[bool, int]:
        """Store ``update`` if it is strictly newer than the stored record.

        Returns ``(accepted, previous_publish_time)``. Stale or equal-time
        updates are ignored without raising.
        """
        existing = self._feeds.get(update.id)
        previous = existing.price.publish_time if existing is not None else 0
        if existing is not None and previous >= update.price.publish_time:
            logger.debug(
                "Ignoring stale update for %s (stored %d, offered %d)",
                format_price_id(update.id),
                previous,
                update.price.publish_time,
            )
            return False, previous

        self._feeds[update.id] = update
        return True, previous

    @staticmethod
    def query_in_window(
        price_id: bytes,
        candidates: Iterable[PriceFeed],
        min_time: int,
        max_time: int,
    ) -> PriceFeed:
        """First candidate for ``price_id`` published within ``[min_time, max_time]``."""
        for feed in candidates:
            if feed.id == price_id and min_time <= feed.price.publish_time <= max_time:
                return feed
        raise PriceFeedNotFoundWithinRange(price_id, min_time, max_time)

    def snapshot(self) -> dict[bytes, PriceFeed]:
        return dict(self._feeds)
