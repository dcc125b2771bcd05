"""Unit tests for data models and id helpers."""
from __future__ import annotations

import pytest

from mock_pyth.models import Price, PriceFeed, format_price_id, to_price_id


class TestToPriceId:
    def test_hex_string_left_padded(self) -> None:
        pid = to_price_id("0xaa")
        assert len(pid) == 32
        assert pid == bytes(31) + b"\xaa"

    def test_hex_without_prefix(self) -> None:
        assert to_price_id("aa") == to_price_id("0xaa")

    def test_int(self) -> None:
        assert to_price_id(0xAA) == to_price_id("0xaa")

    def test_bytes_passthrough(self) -> None:
        raw = bytes(range(32))
        assert to_price_id(raw) is raw

    def test_wrong_length_bytes_raises(self) -> None:
        with pytest.raises(ValueError, match="32 bytes"):
            to_price_id(b"\x01\x02")

    def test_too_large_raises(self) -> None:
        with pytest.raises(ValueError, match="out of range"):
            to_price_id(1 << 256)

    def test_format_round_trips_through_hex(self) -> None:
        pid = to_price_id("0x1234")
        assert format_price_id(pid) == "0x" + "00" * 30 + "1234"


class TestPriceFeed:
    def test_frozen(self) -> None:
        p = Price(price=1, conf=2, expo=-3, publish_time=4)
        with pytest.raises(AttributeError):
            p.price = 5  # type: ignore[misc]

    def test_equality(self) -> None:
        p = Price(price=1, conf=2, expo=-3, publish_time=4)
        a = PriceFeed(id=to_price_id(1), price=p, ema_price=p)
        b = PriceFeed(id=to_price_id(1), price=p, ema_price=p)
        assert a == b
