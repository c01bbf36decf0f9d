#!/usr/bin/env python3
"""
HIA website API blueprint

Mount: /api  (register blueprint with url_prefix="/api")

Endpoints:
  POST /api/contact                 contact form submission
  GET  /api/contacts                contact submissions (admin use)
  POST /api/create-payment-intent   Stripe PaymentIntent for the donate page
  POST /api/donation-success        record a confirmed donation
  GET  /api/donation-stats          count, total and recent donations
  POST /api/ai-census               census data assistant (OpenAI)

Contracts:
- JSON in, JSON out; never cached.
- Input accepts camelCase (website) and snake_case keys; output is camelCase.
- Amounts are integer cents at the store boundary; `amount` in requests is
  dollars, `amountCents` is cents.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional, cast

from flask import Blueprint, current_app, jsonify, request

from hia.extensions import csrf, get_store
from hia.forms import describe_errors, first_errors
from hia.forms.contact_form import ContactForm
from hia.forms.donation_form import DonationRecordForm, PaymentIntentForm
from hia.models import cents_to_dollars
from hia.services.assistant import AssistantError, AssistantUnavailable, ask_census_assistant
from hia.services.payments import PaymentError, PaymentService

bp = Blueprint("api", __name__)

# CSRF exempt (API-style JSON)
csrf.exempt(bp)


# ----------------------------
# Small utilities
# ----------------------------
def _request_payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if isinstance(data, dict) and data:
        return cast(Dict[str, Any], data)
    if request.form:
        return cast(Dict[str, Any], request.form.to_dict(flat=True))
    return {}


def _json_response(payload: Any, status: int = 200):
    resp = jsonify(payload)
    resp.status_code = int(status)
    resp.headers.setdefault("Cache-Control", "no-store, no-cache, must-revalidate, max-age=0")
    resp.headers.setdefault("Pragma", "no-cache")
    resp.headers.setdefault("Expires", "0")
    return resp


def _json_ok(payload: Dict[str, Any], status: int = 200):
    payload.setdefault("ok", True)
    return _json_response(payload, status)


def _json_error(message: str, status: int, extra: Optional[Dict[str, Any]] = None):
    body: Dict[str, Any] = {"ok": False, "message": message, "error": {"message": message}}
    if extra:
        body["error"].update(extra)
        for k, v in extra.items():
            if k not in body:
                body[k] = v
    return _json_response(body, status)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ----------------------------
# Contact
# ----------------------------
@bp.post("/contact")
def submit_contact():
    form = ContactForm.from_payload(_request_payload())
    if not form.validate():
        return _json_error(
            "Error submitting contact form: " + describe_errors(form),
            400,
            {"errors": first_errors(form)},
        )

    contact = get_store().create_contact(**form.cleaned())
    return _json_ok({"success": True, "contact": contact.as_dict()})


@bp.get("/contacts")
def list_contacts():
    return _json_response([c.as_dict() for c in get_store().list_contacts()])


# ----------------------------
# Donations
# ----------------------------
@bp.post("/create-payment-intent")
def create_payment_intent():
    cfg = current_app.config
    form = PaymentIntentForm.from_payload(
        _request_payload(),
        min_cents=int(cfg.get("MIN_DONATION_CENTS", 50)),
        max_cents=int(cfg.get("MAX_DONATION_CENTS", 5_000_000)),
    )
    if not form.validate():
        errors = first_errors(form)
        message = errors.get("amount") or describe_errors(form)
        return _json_error(message, 400, {"errors": errors})

    try:
        intent = PaymentService.create_stripe_intent(int(form.parsed_cents or 0), **form.donor())
    except PaymentError as e:
        return _json_error("Error creating payment intent: " + str(e), 502)

    return _json_ok(
        {
            "clientSecret": intent["client_secret"],
            "paymentIntentId": intent["id"],
            "amountCents": intent["amount"],
            "currency": intent["currency"],
            "demo": bool(intent.get("demo")),
        }
    )


@bp.post("/donation-success")
def donation_success():
    form = DonationRecordForm.from_payload(_request_payload())
    if not form.validate():
        return _json_error(
            "Error recording donation: " + describe_errors(form),
            400,
            {"errors": first_errors(form)},
        )

    donation = get_store().create_donation(**form.cleaned())
    return _json_ok({"success": True, "donation": donation.as_dict()})


@bp.get("/donation-stats")
def donation_stats():
    store = get_store()
    limit = int(current_app.config.get("RECENT_DONATIONS_LIMIT", 10))
    donations = store.list_donations()
    total_cents = store.total_donated()
    recent = donations[-limit:] if limit > 0 else []

    return _json_response(
        {
            "totalDonations": len(donations),
            "totalAmount": cents_to_dollars(total_cents),
            "totalAmountCents": total_cents,
            "recentDonations": [d.as_dict() for d in recent],
        }
    )


# ----------------------------
# AI Census Assistant
# ----------------------------
@bp.post("/ai-census")
def ai_census():
    message = _request_payload().get("message")
    if not message or not isinstance(message, str) or not message.strip():
        return _json_error("Message is required", 400)

    try:
        reply = ask_census_assistant(message)
    except AssistantUnavailable as e:
        return _json_error("Error processing AI request: " + str(e), 503)
    except AssistantError as e:
        return _json_error("Error processing AI request: " + str(e), 500)

    return _json_response({"response": reply, "timestamp": _now_iso()})
