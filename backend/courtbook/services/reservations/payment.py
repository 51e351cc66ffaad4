# backend/courtbook/services/reservations/payment.py
"""
Simulated payment handling.

No processor is called. The method chosen at checkout decides the status
once, at booking time:

- card_simulated / instant_transfer_simulated → paid immediately
- on_site → pending (paid at the front desk, never reconciled here)
"""

from dataclasses import dataclass
from decimal import Decimal

from ...constants import PaymentMethod, PaymentStatus
from ..slots.config import CourtConfig

_STATUS_BY_METHOD = {
    PaymentMethod.ON_SITE: PaymentStatus.PENDING,
    PaymentMethod.CARD_SIMULATED: PaymentStatus.PAID,
    PaymentMethod.INSTANT_TRANSFER_SIMULATED: PaymentStatus.PAID,
}

CENTS = Decimal("0.01")


def resolve_payment_status(method: PaymentMethod) -> PaymentStatus:
    return _STATUS_BY_METHOD[PaymentMethod(method)]


@dataclass(frozen=True)
class Quote:
    blocks: int
    price_per_block: Decimal
    total: Decimal
    currency: str


def quote_blocks(blocks: int, config: CourtConfig) -> Quote:
    """Price of `blocks` half-hour blocks at the configured rate."""
    price = config.price_per_block.quantize(CENTS)
    return Quote(
        blocks=blocks,
        price_per_block=price,
        total=(price * blocks).quantize(CENTS),
        currency=config.currency,
    )
