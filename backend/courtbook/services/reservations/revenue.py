# backend/courtbook/services/reservations/revenue.py

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ...constants import PaymentStatus
from .payment import CENTS


@dataclass(frozen=True)
class RevenueSummary:
    paid_total: Decimal
    pending_total: Decimal
    paid_count: int
    pending_count: int


def aggregate(reservations: Iterable) -> RevenueSummary:
    """Sum reservation prices of a day by payment status."""
    paid_total = Decimal("0")
    pending_total = Decimal("0")
    paid_count = 0
    pending_count = 0

    for r in reservations:
        status = PaymentStatus(r.payment_status)
        if status is PaymentStatus.PAID:
            paid_total += Decimal(str(r.price))
            paid_count += 1
        else:
            pending_total += Decimal(str(r.price))
            pending_count += 1

    return RevenueSummary(
        paid_total=paid_total.quantize(CENTS),
        pending_total=pending_total.quantize(CENTS),
        paid_count=paid_count,
        pending_count=pending_count,
    )
