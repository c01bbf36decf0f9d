"""Tests for record serialization and money helpers."""

from __future__ import annotations

import importlib
from datetime import datetime, timezone

import pytest

from hia.models import Account, ContactSubmission, Donation, cents_to_dollars, dollars_to_cents

TS = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


class TestMoney:
    @pytest.mark.parametrize(
        ("raw", "cents"),
        [("25", 2500), ("0.50", 50), ("19.995", 2000), (12.34, 1234), ("  7 ", 700)],
    )
    def test_dollars_to_cents(self, raw, cents) -> None:
        assert dollars_to_cents(raw) == cents

    def test_cents_to_dollars(self) -> None:
        assert cents_to_dollars(1750) == 17.5
        assert cents_to_dollars(0) == 0.0


class TestSerialization:
    def test_contact_as_dict_uses_wire_names(self) -> None:
        contact = ContactSubmission(
            id=3,
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            interest="partnership",
            message="Let us work together.",
            created_at=TS,
        )
        data = contact.as_dict()
        assert data["firstName"] == "Ada"
        assert data["lastName"] == "Lovelace"
        assert data["createdAt"] == "2025-03-01T09:30:00+00:00"
        assert contact.full_name == "Ada Lovelace"

    def test_donation_as_dict(self) -> None:
        donation = Donation(id=1, amount=2550, payment_intent_id="pi_1", created_at=TS, donor_name="Grace Hopper")
        data = donation.as_dict()
        assert data["amount"] == 2550
        assert data["amountDollars"] == 25.5
        assert data["stripePaymentIntentId"] == "pi_1"
        assert data["isRecurring"] is False
        assert data["donorEmail"] is None
        assert data["shortName"] == "Grace H."

    def test_anonymous_short_name(self) -> None:
        donation = Donation(id=1, amount=100, payment_intent_id="pi", created_at=TS)
        assert donation.short_name == "Anonymous"

    def test_account_as_dict_hides_secret(self) -> None:
        data = Account(id=1, username="ada", secret="pbkdf2:...").as_dict()
        assert data == {"id": 1, "username": "ada"}


@pytest.mark.parametrize("module", ["account", "contact", "mixins"])
def test_model_modules_documented(module: str) -> None:
    assert importlib.import_module(f"hia.models.{module}").__doc__
