# hia/config/config.py
# Canonical HIA website configuration (env-first, production-safe)

from __future__ import annotations

import os
from typing import Optional


# ----------------------------
# Env helpers
# ----------------------------
_TRUTHY = {"1", "true", "yes", "on", "y"}
_FALSY = {"0", "false", "no", "off", "n"}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return default
    s = str(v).strip()
    return s if s else default


def _bool(name: str, default: bool = False) -> bool:
    v = _env(name)
    if v is None:
        return default
    s = v.strip().lower()
    if s in _TRUTHY:
        return True
    if s in _FALSY:
        return False
    return default


def _int(name: str, default: int) -> int:
    v = _env(name)
    if v is None:
        return default
    try:
        return int(str(v).strip())
    except ValueError:
        return default


def _float(name: str, default: float) -> float:
    v = _env(name)
    if v is None:
        return default
    try:
        return float(str(v).strip())
    except ValueError:
        return default


# ----------------------------
# Config classes
# ----------------------------
class BaseConfig:
    """
    Env-first config:
    - all important settings can be overridden via environment variables
    - safe defaults for local dev
    """

    ENV = (_env("APP_ENV") or _env("ENV") or _env("FLASK_ENV") or "base").strip().lower()

    DEBUG = _bool("FLASK_DEBUG", False)
    TESTING = _bool("TESTING", False)

    SECRET_KEY = _env("SECRET_KEY", "dev-change-me")
    BRAND_NAME = _env("BRAND_NAME", "HIA")

    TRUST_PROXY = _bool("TRUST_PROXY", False)
    CORS_ORIGINS = _env("CORS_ORIGINS", "*")

    LOG_LEVEL = _env("LOG_LEVEL", "INFO")
    WERKZEUG_LOG_LEVEL = _env("WERKZEUG_LOG_LEVEL", "WARNING")

    # JSON API only; forms validate without CSRF tokens
    WTF_CSRF_ENABLED = False

    # Stripe
    STRIPE_SECRET_KEY = _env("STRIPE_SECRET_KEY", "")
    STRIPE_PUBLISHABLE_KEY = _env("STRIPE_PUBLISHABLE_KEY", "")
    STRIPE_MAX_NETWORK_RETRIES = _int("STRIPE_MAX_NETWORK_RETRIES", 2)
    DEFAULT_CURRENCY = _env("DEFAULT_CURRENCY", "usd")
    MIN_DONATION_CENTS = _int("MIN_DONATION_CENTS", 50)
    MAX_DONATION_CENTS = _int("MAX_DONATION_CENTS", 50_000 * 100)
    RECENT_DONATIONS_LIMIT = _int("RECENT_DONATIONS_LIMIT", 10)
    DEMO_MODE = _bool("DEMO_MODE", False)

    # OpenAI (census assistant)
    OPENAI_API_KEY = _env("OPENAI_API_KEY", "")
    OPENAI_MODEL = _env("OPENAI_MODEL", "gpt-4o")
    OPENAI_MAX_TOKENS = _int("OPENAI_MAX_TOKENS", 1000)
    OPENAI_TEMPERATURE = _float("OPENAI_TEMPERATURE", 0.7)
    OPENAI_TIMEOUT_SECS = _float("OPENAI_TIMEOUT_SECS", 30.0)
    OPENAI_MAX_RETRIES = _int("OPENAI_MAX_RETRIES", 1)

    @classmethod
    def init_app(cls, app) -> None:
        """Hook called by create_app() after app.config.from_object(...)."""
        cur = str(app.config.get("DEFAULT_CURRENCY") or "usd").strip().lower()
        app.config["DEFAULT_CURRENCY"] = cur if len(cur) == 3 and cur.isalpha() else "usd"


class DevelopmentConfig(BaseConfig):
    ENV = "development"
    DEBUG = True
    TRUST_PROXY = _bool("TRUST_PROXY", False)


class TestingConfig(BaseConfig):
    ENV = "testing"
    TESTING = True
    DEBUG = False
    SECRET_KEY = "testing"
    DEMO_MODE = True
    STRIPE_SECRET_KEY = ""
    STRIPE_PUBLISHABLE_KEY = ""
    OPENAI_API_KEY = ""
    OPENAI_MAX_RETRIES = 0
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    ENV = "production"
    DEBUG = False
    TRUST_PROXY = _bool("TRUST_PROXY", True)
    CORS_ORIGINS = _env("CORS_ORIGINS", "")

    @classmethod
    def init_app(cls, app) -> None:
        super().init_app(app)

        # ---- Production guardrails (fail fast) ----
        sk = app.config.get("SECRET_KEY")
        if not sk or sk == "dev-change-me":
            raise RuntimeError("SECRET_KEY must be set to a strong random value in production.")

        if _bool("FLASK_DEBUG", False):
            raise RuntimeError("FLASK_DEBUG must be 0 in production.")

        if app.config.get("DEMO_MODE"):
            return

        if not app.config.get("STRIPE_SECRET_KEY"):
            raise RuntimeError("Missing required Stripe secret: STRIPE_SECRET_KEY")
        if not app.config.get("OPENAI_API_KEY"):
            raise RuntimeError("Missing required OpenAI API key: OPENAI_API_KEY")
