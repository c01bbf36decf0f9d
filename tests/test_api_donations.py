"""Tests for payment-intent, donation recording and stats endpoints."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
import stripe
from flask import Flask
from flask.testing import FlaskClient

from hia.store import DomainStore


class TestCreatePaymentIntent:
    def test_demo_intent(self, client: FlaskClient) -> None:
        resp = client.post("/api/create-payment-intent", json={"amount": 25, "donorEmail": "a@example.com"})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["demo"] is True
        assert body["amountCents"] == 2500
        assert body["clientSecret"]
        assert body["paymentIntentId"].startswith("pi_demo_")

    @pytest.mark.parametrize("payload", [{}, {"amount": 0}, {"amount": 0.25}, {"amountCents": 49}])
    def test_minimum_enforced(self, client: FlaskClient, payload: dict) -> None:
        resp = client.post("/api/create-payment-intent", json=payload)
        assert resp.status_code == 400
        assert resp.get_json()["ok"] is False

    def test_minimum_message(self, client: FlaskClient) -> None:
        resp = client.post("/api/create-payment-intent", json={"amount": 0.3})
        assert resp.get_json()["message"] == "Donation amount must be at least $0.50"

    def test_stripe_called_with_cents_and_metadata(
        self, app: Flask, client: FlaskClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls = []

        def _create(**params):
            calls.append(params)
            return SimpleNamespace(id="pi_live_1", client_secret="pi_live_1_secret")

        app.config["DEMO_MODE"] = False
        app.extensions["stripe"] = SimpleNamespace(PaymentIntent=SimpleNamespace(create=_create))

        resp = client.post(
            "/api/create-payment-intent",
            json={"amount": 10.5, "donorName": "Grace", "isRecurring": True},
        )
        assert resp.status_code == 200
        assert resp.get_json()["clientSecret"] == "pi_live_1_secret"
        assert calls[0]["amount"] == 1050
        assert calls[0]["currency"] == "usd"
        assert calls[0]["metadata"] == {"donorEmail": "", "donorName": "Grace", "isRecurring": "true"}

    def test_stripe_failure(self, app: Flask, client: FlaskClient) -> None:
        def _create(**params):
            raise stripe.APIConnectionError("network down")

        app.config["DEMO_MODE"] = False
        app.extensions["stripe"] = SimpleNamespace(PaymentIntent=SimpleNamespace(create=_create))

        resp = client.post("/api/create-payment-intent", json={"amount": 10})
        assert resp.status_code == 502
        assert resp.get_json()["message"].startswith("Error creating payment intent:")


class TestDonationSuccess:
    def test_records_donation(self, client: FlaskClient, store: DomainStore) -> None:
        resp = client.post(
            "/api/donation-success",
            json={"paymentIntentId": "pi_1", "amount": 25, "donorName": "Ada Lovelace"},
        )
        assert resp.status_code == 200
        donation = resp.get_json()["donation"]
        assert donation["amount"] == 2500
        assert donation["isRecurring"] is False
        assert donation["donorEmail"] is None
        assert donation["stripePaymentIntentId"] == "pi_1"
        assert store.total_donated() == 2500

    def test_missing_intent_id(self, client: FlaskClient, store: DomainStore) -> None:
        resp = client.post("/api/donation-success", json={"amount": 25})
        assert resp.status_code == 400
        assert resp.get_json()["message"].startswith("Error recording donation:")
        assert store.list_donations() == []


class TestDonationStats:
    def test_empty(self, client: FlaskClient) -> None:
        body = client.get("/api/donation-stats").get_json()
        assert body == {"totalDonations": 0, "totalAmount": 0.0, "totalAmountCents": 0, "recentDonations": []}

    def test_totals(self, client: FlaskClient, store: DomainStore) -> None:
        for i, cents in enumerate([500, 250, 1000]):
            store.create_donation(amount=cents, payment_intent_id=f"pi_{i}")
        body = client.get("/api/donation-stats").get_json()
        assert body["totalDonations"] == 3
        assert body["totalAmountCents"] == 1750
        assert body["totalAmount"] == 17.5

    def test_recent_limited_to_last_ten(self, client: FlaskClient, store: DomainStore) -> None:
        for i in range(12):
            store.create_donation(amount=100, payment_intent_id=f"pi_{i}")
        recent = client.get("/api/donation-stats").get_json()["recentDonations"]
        assert [d["id"] for d in recent] == list(range(3, 13))


@pytest.mark.parametrize("raw", ["False", "0", "no"])
def test_recurring_false_spellings(client: FlaskClient, raw: str) -> None:
    resp = client.post("/api/donation-success", json={"paymentIntentId": "pi_1", "amount": 5, "isRecurring": raw})
    assert resp.get_json()["donation"]["isRecurring"] is False
