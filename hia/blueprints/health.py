from __future__ import annotations

import os
import socket
import time
from datetime import datetime, timezone
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from hia.extensions import get_store

bp = Blueprint("health", __name__)

APP_STARTED_AT = time.time()
HOSTNAME = socket.gethostname()

BUILD_VERSION = (
    os.getenv("BUILD_VERSION") or os.getenv("RELEASE") or os.getenv("VERSION") or "dev"
)
GIT_SHA = os.getenv("GIT_SHA", "")[:12]

_TRUTHY = {"1", "true", "yes", "on"}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _overall_status(parts: Dict[str, Dict[str, Any]]) -> str:
    states = [p.get("status", "ok") for p in parts.values()]
    if any(s == "fail" for s in states):
        return "fail"
    if any(s == "degraded" for s in states):
        return "degraded"
    return "ok"


def _stripe_check() -> Dict[str, Any]:
    if current_app.config.get("DEMO_MODE"):
        return {"status": "ok", "ok": True, "mode": "demo"}
    if not current_app.extensions.get("stripe"):
        return {"status": "degraded", "ok": False, "reason": "no-secret-key"}
    return {"status": "ok", "ok": True, "mode": current_app.config.get("STRIPE_MODE", "unknown")}


def _openai_check() -> Dict[str, Any]:
    if not current_app.extensions.get("openai"):
        return {"status": "degraded", "ok": False, "reason": "no-api-key"}
    return {"status": "ok", "ok": True, "model": current_app.config.get("OPENAI_MODEL")}


def _store_check() -> Dict[str, Any]:
    return {"status": "ok", "ok": True, "backend": "memory", "counts": get_store().counts()}


def _summary_payload() -> Dict[str, Any]:
    parts = {
        "store": _store_check(),
        "stripe": _stripe_check(),
        "openai": _openai_check(),
    }
    overall = _overall_status(parts)
    return {
        "status": overall,
        "version": BUILD_VERSION,
        "git": GIT_SHA,
        "hostname": HOSTNAME,
        "started_at": datetime.fromtimestamp(APP_STARTED_AT, tz=timezone.utc).isoformat(
            timespec="seconds"
        ),
        "uptime_s": int(time.time() - APP_STARTED_AT),
        "now": _now_iso(),
        "parts": parts,
    }


@bp.get("/health")
def health():
    return jsonify(_summary_payload())


@bp.get("/status")
def status():
    p = _summary_payload()
    return jsonify({"status": p["status"], "version": p["version"], "now": p["now"]})


@bp.get("/ready")
def ready():
    p = _summary_payload()
    strict = (request.args.get("strict") or "").strip().lower() in _TRUTHY
    bad = p["status"] == "fail" or (strict and p["status"] != "ok")
    return jsonify(p), 503 if bad else 200


@bp.get("/live")
def live():
    return jsonify(
        {
            "status": "ok",
            "now": _now_iso(),
            "uptime_s": int(time.time() - APP_STARTED_AT),
        }
    )
