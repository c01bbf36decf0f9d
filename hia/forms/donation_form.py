"""
Donation forms.

PaymentIntentForm gates /api/create-payment-intent; DonationRecordForm gates
/api/donation-success. Both accept either `amountCents` (integer cents) or
the legacy `amount` (dollars) the donate page sends.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from flask_wtf import FlaskForm
from wtforms import BooleanField, StringField
from wtforms.validators import DataRequired, Email, Length, Optional as OptionalField, ValidationError

from hia.models.donation import dollars_to_cents

from . import payload_formdata

FIELD_ALIASES = {
    "amount_cents": ("amountCents", "amount_cents"),
    "amount": ("amount", "amountDollars", "amount_dollars"),
    "donor_email": ("donorEmail", "donor_email", "email"),
    "donor_name": ("donorName", "donor_name", "name"),
    "is_recurring": ("isRecurring", "is_recurring", "recurring"),
    "payment_intent_id": ("paymentIntentId", "payment_intent_id", "stripePaymentIntentId"),
}


FALSE_VALUES = (False, "false", "False", "FALSE", "0", "no", "off", "")


class _AmountForm(FlaskForm):
    class Meta:
        csrf = False

    amount_cents = StringField("Amount (cents)", validators=[OptionalField()])
    # no Optional() here: validate_amount must also run for cents-only payloads
    amount = StringField("Amount (USD)")
    donor_email = StringField(
        "Email",
        validators=[OptionalField(), Email(message="valid email required"), Length(max=160)],
    )
    donor_name = StringField("Name", validators=[OptionalField(), Length(max=160)])
    is_recurring = BooleanField("Monthly", default=False, false_values=FALSE_VALUES)

    min_cents = 1
    max_cents: Optional[int] = None
    parsed_cents: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: dict, *, min_cents: int = 1, max_cents: Optional[int] = None):
        form = cls(formdata=payload_formdata(payload, FIELD_ALIASES))
        form.min_cents = int(min_cents)
        form.max_cents = max_cents
        return form

    def _parse_cents(self) -> int:
        raw_cents = (self.amount_cents.data or "").strip()
        if raw_cents:
            try:
                return int(raw_cents)
            except ValueError:
                raise ValidationError("amount_cents must be an integer")
        raw_dollars = (self.amount.data or "").strip()
        if not raw_dollars:
            raise ValidationError("amount is required")
        try:
            return dollars_to_cents(raw_dollars)
        except (InvalidOperation, ValueError):
            raise ValidationError("amount must be a number (dollars)")

    def validate_amount(self, field) -> None:
        cents = self._parse_cents()
        if cents < self.min_cents:
            dollars = Decimal(self.min_cents) / Decimal(100)
            raise ValidationError(f"Donation amount must be at least ${dollars:.2f}")
        if self.max_cents is not None and cents > self.max_cents:
            dollars = Decimal(self.max_cents) / Decimal(100)
            raise ValidationError(f"Donation amount must be at most ${dollars:,.2f}")
        self.parsed_cents = cents

    def donor(self) -> dict:
        email = (self.donor_email.data or "").strip().lower()
        name = (self.donor_name.data or "").strip()
        return {
            "donor_email": email or None,
            "donor_name": name or None,
            "is_recurring": bool(self.is_recurring.data),
        }


class PaymentIntentForm(_AmountForm):
    pass


class DonationRecordForm(_AmountForm):
    payment_intent_id = StringField(
        "Payment intent",
        validators=[DataRequired(message="paymentIntentId is required"), Length(max=255)],
    )

    def cleaned(self) -> dict:
        return {
            "amount": int(self.parsed_cents or 0),
            "payment_intent_id": self.payment_intent_id.data.strip(),
            **self.donor(),
        }
