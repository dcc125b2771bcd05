"""Oracle error taxonomy."""
from __future__ import annotations


class PythError(Exception):
    """Base class for every error the mock oracle raises."""


class PriceFeedNotFound(PythError):
    def __init__(self, price_id: bytes) -> None:
        super().__init__(f"Price feed not found: 0x{price_id.hex()}")
        self.price_id = price_id


class PriceFeedNotFoundWithinRange(PythError):
    def __init__(self, price_id: bytes, min_time: int, max_time: int) -> None:
        super().__init__(
            f"Price feed 0x{price_id.hex()} not found within [{min_time}, {max_time}]"
        )
        self.price_id = price_id
        self.min_time = min_time
        self.max_time = max_time


class InsufficientFee(PythError):
    def __init__(self, required: int, provided: int) -> None:
        super().__init__(f"Insufficient fee: required {required}, provided {provided}")
        self.required = required
        self.provided = provided


class RequirePriceFeeds(PythError):
    """Raised when no pending request matches the caller and id set."""

    def __init__(self, price_ids: list[bytes] | tuple[bytes, ...]) -> None:
        ids = ", ".join(f"0x{pid.hex()}" for pid in price_ids)
        super().__init__(f"Price feeds required: [{ids}]")
        self.price_ids = tuple(price_ids)


class StalePrice(PythError):
    def __init__(self, price_id: bytes, publish_time: int, now: int, age: int) -> None:
        super().__init__(
            f"Stale price for 0x{price_id.hex()}: published at {publish_time}, "
            f"now {now}, max age {age}"
        )
        self.price_id = price_id
        self.publish_time = publish_time
        self.now = now
        self.age = age


class InvalidUpdateData(PythError):
    """An update payload could not be decoded into a price feed."""


class SequenceNumberOverflow(PythError):
    """The 64-bit batch sequence counter cannot advance any further."""
