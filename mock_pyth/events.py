"""Observable oracle events and the in-memory recording sink."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Union


@dataclass(frozen=True)
class PriceFeedUpdate:
    """Emitted once per accepted feed in a batch."""

    id: bytes
    last_publish_time: int
    price: int
    conf: int


@dataclass(frozen=True)
class BatchPriceFeedUpdate:
    """Emitted once per processed batch, carrying the pre-increment sequence."""

    chain_id: int
    sequence_number: int


@dataclass(frozen=True)
class PaymentForwarded:
    """Outcome of forwarding a resolve payment to the registered payer."""

    correlation_id: bytes
    recipient: str
    amount: int
    succeeded: bool
    error: str = ""


OracleEvent = Union[PriceFeedUpdate, BatchPriceFeedUpdate, PaymentForwarded]


def event_to_dict(event: OracleEvent) -> dict[str, Any]:
    """JSON-ready representation; bytes fields become 0x-prefixed hex."""
    data: dict[str, Any] = {"event": type(event).__name__}
    for key, value in asdict(event).items():
        data[key] = "0x" + value.hex() if isinstance(value, bytes) else value
    return data


class EventLog:
    """Records every emitted event in order."""

    def __init__(self) -> None:
        self.events: list[OracleEvent] = []

    def emit(self, event: OracleEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list[OracleEvent]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()
