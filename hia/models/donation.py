from __future__ import annotations

# -----------------------------------------------------------------------------
# Donation record
# Cents-based; the processor reference ties the row to a Stripe PaymentIntent.
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from .mixins import TimestampMixin


def cents_to_dollars(cents: int) -> float:
    return round((cents or 0) / 100.0, 2)


def dollars_to_cents(raw: Any) -> int:
    """Parse a dollar amount (str/int/float) into integer cents, half-up."""
    dollars = Decimal(str(raw).strip() or "0")
    return int((dollars * Decimal("100")).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Donation(TimestampMixin):
    id: int
    amount: int
    payment_intent_id: str
    created_at: datetime
    donor_email: Optional[str] = None
    donor_name: Optional[str] = None
    is_recurring: bool = False

    @property
    def amount_dollars(self) -> float:
        return cents_to_dollars(self.amount)

    @property
    def short_name(self) -> str:
        parts = (self.donor_name or "").strip().split()
        if not parts:
            return "Anonymous"
        return f"{parts[0]} {parts[1][0]}." if len(parts) > 1 and parts[1] else parts[0]

    # ==========================================================
    # Serialization
    # ==========================================================
    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "amountDollars": self.amount_dollars,
            "donorEmail": self.donor_email,
            "donorName": self.donor_name,
            "shortName": self.short_name,
            "stripePaymentIntentId": self.payment_intent_id,
            "isRecurring": self.is_recurring,
            "createdAt": self.created_at_iso,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Donation {self.id} ${self.amount_dollars:,.2f} recurring={self.is_recurring}>"
