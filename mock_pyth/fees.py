"""Update fee arithmetic."""
from __future__ import annotations


class FeeCalculator:
    """Required payment for a batch is ``batch_size * single_update_fee_in_wei``."""

    def __init__(self, single_update_fee_in_wei: int) -> None:
        self.single_update_fee_in_wei = single_update_fee_in_wei

    def compute_fee(self, batch_size: int) -> int:
        return self.single_update_fee_in_wei * batch_size
