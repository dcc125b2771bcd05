"""Simulated value transfer."""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass

from .interfaces.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)


class TransferRejected(Exception):
    """A recipient refused an incoming transfer."""


@dataclass(frozen=True)
class TransferResult:
    recipient: str
    amount: int
    succeeded: bool
    error: str = ""


class InMemoryLedger:
    """Credits balances per identity; recipients in ``rejecting`` refuse payment."""

    def __init__(self, rejecting: set[str] | None = None) -> None:
        self.balances: dict[str, int] = defaultdict(int)
        self.rejecting: set[str] = set(rejecting or ())

    def transfer(self, recipient: str, amount: int) -> None:
        if recipient in self.rejecting:
            raise TransferRejected(f"{recipient} rejects transfers")
        if amount < 0:
            raise ValueError(f"Cannot transfer a negative amount: {amount}")
        self.balances[recipient] += amount

    def balance_of(self, identity: str) -> int:
        return self.balances.get(identity, 0)


def forward_payment(
    gateway: PaymentGateway, recipient: str, amount: int
) -> TransferResult:
    """Best-effort transfer; failures are logged and reported, never raised."""
    try:
        gateway.transfer(recipient, amount)
    except Exception as e:
        logger.error("Forwarding %d to %s failed: %s", amount, recipient, e)
        return TransferResult(recipient, amount, succeeded=False, error=str(e))
    logger.debug("Forwarded %d to %s", amount, recipient)
    return TransferResult(recipient, amount, succeeded=True)
