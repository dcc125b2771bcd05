"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass

PRICE_ID_SIZE = 32


@dataclass(frozen=True)
class Price:
    """A single price sample: ``price * 10**expo`` with confidence ``conf``."""

    price: int
    conf: int
    expo: int
    publish_time: int


@dataclass(frozen=True)
class PriceFeed:
    """Current and EMA price for one asset identifier."""

    id: bytes
    price: Price
    ema_price: Price


def to_price_id(value: bytes | str | int) -> bytes:
    """Normalise an identifier to 32 bytes.

    Hex strings (with or without ``0x``) and ints are left-padded the way a
    ``uint256`` converts to ``bytes32``, so ``"0xaa"`` becomes ``00..00aa``.
    """
    if isinstance(value, bytes):
        if len(value) != PRICE_ID_SIZE:
            raise ValueError(
                f"Price id must be {PRICE_ID_SIZE} bytes, got {len(value)}"
            )
        return value
    if isinstance(value, str):
        value = int(value, 16) if value else 0
    if value < 0 or value >= 1 << (PRICE_ID_SIZE * 8):
        raise ValueError(f"Price id out of range: {value}")
    return value.to_bytes(PRICE_ID_SIZE, "big")


def format_price_id(price_id: bytes) -> str:
    return "0x" + price_id.hex()
