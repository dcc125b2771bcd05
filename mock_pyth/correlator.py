"""Pending on-demand price requests keyed by a correlation id."""
from __future__ import annotations

import hashlib
import logging
from collections.abc import Sequence

from .errors import RequirePriceFeeds
from .models import PRICE_ID_SIZE

logger = logging.getLogger(__name__)


def check_price_ids(price_ids: Sequence[bytes]) -> None:
    """Raise ``ValueError`` unless every id is exactly 32 bytes."""
    for price_id in price_ids:
        if not isinstance(price_id, bytes) or len(price_id) != PRICE_ID_SIZE:
            raise ValueError(
                f"Price id must be {PRICE_ID_SIZE} bytes, got {price_id!r}"
            )


def correlation_id(requester: str, price_ids: Sequence[bytes]) -> bytes:
    """SHA3-256 of the requester followed by the ordered id list.

    The requester is length-prefixed and every id has the fixed 32-byte
    width, so the encoding is unambiguous. Id order is significant.
    """
    check_price_ids(price_ids)
    encoded = requester.encode("utf-8")
    digest = hashlib.sha3_256()
    digest.update(len(encoded).to_bytes(32, "big"))
    digest.update(encoded)
    digest.update(len(price_ids).to_bytes(32, "big"))
    for price_id in price_ids:
        digest.update(price_id)
    return digest.digest()


class RequestCorrelator:
    """Two-phase request/resolve bookkeeping.

    At most one payer is pending per correlation id; registering again for the
    same key replaces the payer.
    """

    def __init__(self) -> None:
        self._pending: dict[bytes, str] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def is_pending(self, key: bytes) -> bool:
        return key in self._pending

    def register(self, requester: str, price_ids: Sequence[bytes], payer: str) -> bytes:
        key = correlation_id(requester, price_ids)
        replaced = self._pending.get(key)
        if replaced is not None and replaced != payer:
            logger.info(
                "Pending request 0x%s payer changed from %s to %s",
                key.hex(),
                replaced,
                payer,
            )
        self._pending[key] = payer
        return key

    def resolve(self, caller: str, price_ids: Sequence[bytes]) -> tuple[bytes, str]:
        """Remove and return ``(correlation_id, payer)`` for a pending request."""
        key = correlation_id(caller, price_ids)
        payer = self._pending.pop(key, None)
        if payer is None:
            raise RequirePriceFeeds(list(price_ids))
        return key, payer

    def snapshot(self) -> dict[bytes, str]:
        return dict(self._pending)
