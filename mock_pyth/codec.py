"""Price feed wire codec.

A payload is the ABI encoding of a static ``PriceFeed`` struct: nine 32-byte
big-endian words (id, then price/conf/expo/publish_time for the current price,
then the same four for the EMA price). Signed fields use two's complement.
"""
from __future__ import annotations

from .errors import InvalidUpdateData
from .models import PRICE_ID_SIZE, Price, PriceFeed, to_price_id

WORD_SIZE = 32
PAYLOAD_SIZE = WORD_SIZE * 9

# (signed, bits) per Price field, in encoding order
_PRICE_FIELDS: tuple[tuple[str, bool, int], ...] = (
    ("price", True, 64),
    ("conf", False, 64),
    ("expo", True, 32),
    ("publish_time", False, 256),
)


def _check_range(name: str, value: int, signed: bool, bits: int) -> None:
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        kind = "int" if signed else "uint"
        raise ValueError(f"{name}={value} does not fit in {kind}{bits}")


def _encode_price(price: Price) -> bytes:
    words = []
    for name, signed, bits in _PRICE_FIELDS:
        value = getattr(price, name)
        _check_range(name, value, signed, bits)
        words.append(value.to_bytes(WORD_SIZE, "big", signed=signed))
    return b"".join(words)


def _decode_price(data: bytes) -> Price:
    values: dict[str, int] = {}
    for i, (name, signed, bits) in enumerate(_PRICE_FIELDS):
        word = data[i * WORD_SIZE:(i + 1) * WORD_SIZE]
        value = int.from_bytes(word, "big", signed=signed)
        try:
            _check_range(name, value, signed, bits)
        except ValueError as e:
            raise InvalidUpdateData(str(e)) from e
        values[name] = value
    return Price(**values)


def encode_price_feed(feed: PriceFeed) -> bytes:
    """Encode a price feed into an update payload."""
    if len(feed.id) != PRICE_ID_SIZE:
        raise ValueError(f"Price id must be {PRICE_ID_SIZE} bytes, got {len(feed.id)}")
    return feed.id + _encode_price(feed.price) + _encode_price(feed.ema_price)


def decode_price_feed(payload: bytes) -> PriceFeed:
    """Decode an update payload, raising ``InvalidUpdateData`` if malformed."""
    if not isinstance(payload, (bytes, bytearray)):
        raise InvalidUpdateData(f"Update data must be bytes, got {type(payload).__name__}")
    if len(payload) != PAYLOAD_SIZE:
        raise InvalidUpdateData(
            f"Update data must be {PAYLOAD_SIZE} bytes, got {len(payload)}"
        )
    payload = bytes(payload)
    half = 4 * WORD_SIZE
    return PriceFeed(
        id=payload[:WORD_SIZE],
        price=_decode_price(payload[WORD_SIZE:WORD_SIZE + half]),
        ema_price=_decode_price(payload[WORD_SIZE + half:]),
    )


def create_price_feed_update_data(
    price_id: bytes | str | int,
    price: int,
    conf: int,
    expo: int,
    ema_price: int,
    ema_conf: int,
    publish_time: int,
) -> bytes:
    """Build an update payload; current and EMA prices share expo and publish time."""
    feed = PriceFeed(
        id=to_price_id(price_id),
        price=Price(price=price, conf=conf, expo=expo, publish_time=publish_time),
        ema_price=Price(
            price=ema_price, conf=ema_conf, expo=expo, publish_time=publish_time
        ),
    )
    return encode_price_feed(feed)
