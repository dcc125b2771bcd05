"""Payment gateway protocol — abstract value transfer."""
from typing import Protocol


class PaymentGateway(Protocol):
    """Abstract interface for paying an identity; raises on failure."""

    def transfer(self, recipient: str, amount: int) -> None: ...
