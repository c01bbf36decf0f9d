# hia/services/payments.py
import logging
import random
import time
from typing import Optional

import stripe
from flask import current_app

log = logging.getLogger(__name__)


class PaymentError(RuntimeError):
    """Stripe rejected or failed the request."""


class PaymentService:
    """Stripe PaymentIntent creation with demo mode toggle."""

    @staticmethod
    def _demo_mode() -> bool:
        if current_app.config.get("DEMO_MODE"):
            return True
        # no keys outside production: behave like demo instead of failing
        return not current_app.extensions.get("stripe") and current_app.config.get("ENV") != "production"

    @staticmethod
    def _currency() -> str:
        return str(current_app.config.get("DEFAULT_CURRENCY") or "usd").lower()

    # ---------------- STRIPE ----------------
    @staticmethod
    def create_stripe_intent(
        amount_cents: int,
        *,
        donor_email: Optional[str] = None,
        donor_name: Optional[str] = None,
        is_recurring: bool = False,
    ) -> dict:
        metadata = {
            "donorEmail": donor_email or "",
            "donorName": donor_name or "",
            "isRecurring": "true" if is_recurring else "false",
        }

        if PaymentService._demo_mode():
            # fake client_secret for demo
            intent_id = f"pi_demo_{int(time.time())}{random.randint(1000, 9999)}"
            log.info("demo payment intent %s amount_cents=%s", intent_id, amount_cents)
            return {
                "id": intent_id,
                "client_secret": f"{intent_id}_secret_demo",
                "amount": int(amount_cents),
                "currency": PaymentService._currency(),
                "demo": True,
            }

        client = current_app.extensions.get("stripe")
        if client is None:
            raise PaymentError("Stripe is not configured")

        params = {
            "amount": int(amount_cents),
            "currency": PaymentService._currency(),
            "metadata": metadata,
            "automatic_payment_methods": {"enabled": True},
        }
        if donor_email:
            params["receipt_email"] = donor_email

        try:
            intent = client.PaymentIntent.create(**params)
        except stripe.StripeError as e:
            msg = getattr(e, "user_message", None) or str(e)
            log.warning("Stripe PaymentIntent.create failed: %s", msg)
            raise PaymentError(msg) from e

        log.info("payment intent %s created amount_cents=%s", intent.id, amount_cents)
        return {
            "id": intent.id,
            "client_secret": intent.client_secret,
            "amount": int(amount_cents),
            "currency": params["currency"],
            "demo": False,
        }
