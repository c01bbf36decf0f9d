"""Tests for config selection and production guardrails."""

from __future__ import annotations

import pytest

from hia import create_app
from hia.config import CONFIG_BY_NAME, DevelopmentConfig, ProductionConfig, TestingConfig
from hia.config.config import _bool, _int


class StrictProd(ProductionConfig):
    SECRET_KEY = "a-real-secret"
    DEMO_MODE = False
    STRIPE_SECRET_KEY = "sk_live_123"
    OPENAI_API_KEY = "sk-openai-123"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FLASK_DEBUG", "FLASK_CONFIG", "SENTRY_DSN", "TRUST_PROXY", "DISABLE_BPS"):
        monkeypatch.delenv(name, raising=False)


class TestEnvHelpers:
    def test_int(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("X_INT", "42")
        assert _int("X_INT", 1) == 42
        monkeypatch.setenv("X_INT", "forty")
        assert _int("X_INT", 1) == 1
        assert _int("X_MISSING", 7) == 7

    def test_bool(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("X_BOOL", "yes")
        assert _bool("X_BOOL") is True
        monkeypatch.setenv("X_BOOL", "off")
        assert _bool("X_BOOL", True) is False
        monkeypatch.setenv("X_BOOL", "maybe")
        assert _bool("X_BOOL", True) is True


class TestProductionGuardrails:
    def test_default_secret_rejected(self) -> None:
        class WeakSecret(StrictProd):
            SECRET_KEY = "dev-change-me"

        with pytest.raises(RuntimeError, match="SECRET_KEY"):
            create_app(WeakSecret)

    def test_missing_stripe_key(self) -> None:
        class NoStripe(StrictProd):
            STRIPE_SECRET_KEY = ""

        with pytest.raises(RuntimeError, match="STRIPE_SECRET_KEY"):
            create_app(NoStripe)

    def test_missing_openai_key(self) -> None:
        class NoOpenAI(StrictProd):
            OPENAI_API_KEY = ""

        with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
            create_app(NoOpenAI)

    def test_debug_flag_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLASK_DEBUG", "1")
        with pytest.raises(RuntimeError, match="FLASK_DEBUG"):
            create_app(StrictProd)

    def test_demo_mode_skips_key_checks(self) -> None:
        class Demo(ProductionConfig):
            SECRET_KEY = "a-real-secret"
            DEMO_MODE = True
            STRIPE_SECRET_KEY = ""
            OPENAI_API_KEY = ""

        app = create_app(Demo)
        assert app.config["ENV"] == "production"
        assert app.debug is False

    def test_live_keys_wire_clients(self) -> None:
        app = create_app(StrictProd)
        assert app.config["STRIPE_MODE"] == "live"
        assert app.extensions["stripe"] is not None
        assert app.extensions["openai"] is not None


class TestSelection:
    def test_dotted_path(self) -> None:
        app = create_app("hia.config.TestingConfig")
        assert app.testing is True

    def test_flask_config_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLASK_CONFIG", "hia.config.TestingConfig")
        assert create_app().config["ENV"] == "testing"

    def test_registry(self) -> None:
        assert CONFIG_BY_NAME["development"] is DevelopmentConfig
        assert CONFIG_BY_NAME["testing"] is TestingConfig
        assert CONFIG_BY_NAME["production"] is ProductionConfig

    def test_currency_normalized(self) -> None:
        class Euro(TestingConfig):
            DEFAULT_CURRENCY = " EUR "

        assert create_app(Euro).config["DEFAULT_CURRENCY"] == "eur"

    def test_disable_blueprint(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DISABLE_BPS", "health")
        app = create_app(TestingConfig)
        assert "health" not in app.blueprints
        assert "api" in app.blueprints
