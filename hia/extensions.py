import os
from typing import Any, Optional

import stripe  # Stripe integration
from flask import current_app
from flask_cors import CORS
from flask_wtf.csrf import CSRFProtect
from openai import OpenAI

from hia.store import DomainStore


# ─────────────────────────────────────────────────────────────
# Core singletons
# ─────────────────────────────────────────────────────────────
cors = CORS()
csrf = CSRFProtect()


# ─────────────────────────────────────────────────────────────
# Stripe initialization
# ─────────────────────────────────────────────────────────────
def _guess_stripe_mode(api_key: Optional[str]) -> str:
    if not api_key:
        return "disabled"
    if api_key.startswith(("sk_live_", "rk_live_")):
        return "live"
    if api_key.startswith(("sk_test_", "rk_test_")):
        return "test"
    return "unknown"


def _resolve_stripe_secret(app: Any) -> str:
    return str(app.config.get("STRIPE_SECRET_KEY") or "").strip()


def init_stripe(app: Any) -> None:
    api_key = _resolve_stripe_secret(app)
    app.config["STRIPE_MODE"] = _guess_stripe_mode(api_key)

    if not api_key:
        app.logger.warning("Stripe NOT initialized: missing STRIPE_SECRET_KEY")
        app.extensions["stripe"] = None
        return

    stripe.api_key = api_key
    stripe.max_network_retries = int(app.config.get("STRIPE_MAX_NETWORK_RETRIES") or 2)
    try:
        stripe.set_app_info(app.config.get("BRAND_NAME", "HIA"), version=os.getenv("GIT_COMMIT", "dev"))
    except Exception as e:
        app.logger.debug("stripe.set_app_info failed: %s", e)
    app.extensions["stripe"] = stripe

    app.logger.info("Stripe initialized (%s mode)", app.config["STRIPE_MODE"])


# ─────────────────────────────────────────────────────────────
# OpenAI initialization
# ─────────────────────────────────────────────────────────────
def init_openai(app: Any) -> None:
    api_key = str(app.config.get("OPENAI_API_KEY") or "").strip()
    if not api_key:
        app.logger.warning("OpenAI NOT initialized: missing OPENAI_API_KEY")
        app.extensions["openai"] = None
        return

    app.extensions["openai"] = OpenAI(
        api_key=api_key,
        timeout=float(app.config.get("OPENAI_TIMEOUT_SECS") or 30.0),
        max_retries=0,
    )
    app.logger.info("OpenAI client initialized (model=%s)", app.config.get("OPENAI_MODEL"))


# ─────────────────────────────────────────────────────────────
# Domain store (one per app instance)
# ─────────────────────────────────────────────────────────────
STORE_KEY = "hia_store"


def init_store(app: Any, store: Optional[DomainStore] = None) -> DomainStore:
    store = store if store is not None else DomainStore()
    app.extensions[STORE_KEY] = store
    return store


def get_store() -> DomainStore:
    return current_app.extensions[STORE_KEY]


# ─────────────────────────────────────────────────────────────
# Init all extensions
# ─────────────────────────────────────────────────────────────
def init_all_extensions(app: Any, *, cors_origins: Any = "*") -> None:
    csrf.init_app(app)

    if cors_origins:
        # Browser rule: cannot use credentials with wildcard origin
        cors.init_app(
            app,
            resources={r"/api/*": {"origins": cors_origins}},
            supports_credentials=cors_origins != "*",
            expose_headers=["X-Request-ID"],
            allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
            methods=["GET", "POST", "OPTIONS"],
        )

    init_stripe(app)
    init_openai(app)


__all__ = [
    "cors",
    "csrf",
    "init_all_extensions",
    "init_stripe",
    "init_openai",
    "init_store",
    "get_store",
]
