# hia/__init__.py
# HIA website Flask app factory.
# One DomainStore per app (app.extensions), JSON errors for API and health-check
# routes, request ids on every log line and response.

from __future__ import annotations

import logging
import os
import time
from importlib import import_module
from typing import Any, Dict, List, Optional, Tuple, Type, Union
from uuid import uuid4

import sentry_sdk
from dotenv import load_dotenv
from flask import Blueprint, Flask, g, jsonify, request
from sentry_sdk.integrations.flask import FlaskIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.utils import import_string

# real env vars always win over .env
load_dotenv(override=False)

from hia.extensions import get_store, init_all_extensions, init_store  # noqa: E402
from hia.store import DomainStore  # noqa: E402

ConfigLike = Union[str, Type[Any]]

MODE_ALIASES = {"prod": "production", "dev": "development", "test": "testing"}
CONFIG_BY_MODE = {
    "production": "hia.config.ProductionConfig",
    "testing": "hia.config.TestingConfig",
    "development": "hia.config.DevelopmentConfig",
}
JSON_PREFIXES = ("/api/", "/health", "/status", "/ready", "/live")

BLUEPRINTS: List[Tuple[str, Optional[str]]] = [
    ("hia.blueprints.api", "/api"),
    ("hia.blueprints.health", None),
]


def _runtime_mode(app: Optional[Flask] = None) -> str:
    """ENV from the loaded config class, else HIA_ENV/ENV/FLASK_ENV, else development."""
    if app is not None:
        configured = str(app.config.get("ENV") or "").strip().lower()
        if configured and configured != "base":
            return MODE_ALIASES.get(configured, configured)
    for key in ("HIA_ENV", "ENV", "FLASK_ENV"):
        value = (os.getenv(key) or "").strip().lower()
        if value:
            return MODE_ALIASES.get(value, value)
    return "development"


def _pick_config(target: Optional[ConfigLike]) -> ConfigLike:
    if target is not None:
        return target
    return (os.getenv("FLASK_CONFIG") or "").strip() or CONFIG_BY_MODE.get(
        _runtime_mode(), CONFIG_BY_MODE["development"]
    )


def _cors_origins(raw: Optional[str]) -> Union[str, List[str]]:
    raw = (raw or "").strip()
    if "," not in raw:
        return raw
    return [o.strip() for o in raw.split(",") if o.strip()]


def _error_response(message: str, status: int):
    body: Dict[str, Any] = {
        "ok": False,
        "message": message,
        "error": {"code": status, "message": message, "request_id": getattr(g, "request_id", "-")},
    }
    resp = jsonify(body)
    resp.status_code = status
    return resp


# ----------------------------
# Logging
# ----------------------------
class _RequestIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        try:
            record.request_id = getattr(g, "request_id", "-")
        except RuntimeError:
            # no app context
            record.request_id = "-"
        return True


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [rid=%(request_id)s]: %(message)s"


def _configure_logging(app: Flask) -> None:
    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(logging.StreamHandler())

    for handler in root.handlers:
        if not any(isinstance(f, _RequestIDFilter) for f in handler.filters):
            handler.addFilter(_RequestIDFilter())
        if handler.formatter is None:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root.setLevel(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    logging.getLogger("werkzeug").setLevel(str(app.config.get("WERKZEUG_LOG_LEVEL", "WARNING")).upper())


def _init_sentry(app: Flask) -> None:
    dsn = (os.getenv("SENTRY_DSN") or "").strip()
    if not dsn:
        return
    sentry_sdk.init(
        dsn=dsn,
        integrations=[FlaskIntegration(), LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0")),
        send_default_pii=False,
        environment=app.config["ENV"],
        release=os.getenv("GIT_COMMIT"),
    )
    app.logger.info("Sentry enabled")


# ----------------------------
# Wiring
# ----------------------------
def _register_blueprints(app: Flask) -> None:
    disabled = {name.strip().lower() for name in os.getenv("DISABLE_BPS", "").split(",") if name.strip()}
    for dotted, prefix in BLUEPRINTS:
        if dotted.rsplit(".", 1)[-1] in disabled:
            app.logger.info("blueprint %s disabled via DISABLE_BPS", dotted)
            continue
        bp = getattr(import_module(dotted), "bp", None)
        if not isinstance(bp, Blueprint):
            raise RuntimeError(f"{dotted} has no `bp` Blueprint")
        app.register_blueprint(bp, url_prefix=prefix)


def _register_hooks(app: Flask) -> None:
    @app.before_request
    def _start_request():
        g.request_id = request.headers.get("X-Request-ID") or uuid4().hex
        g.started = time.perf_counter()

    @app.after_request
    def _stamp_response(resp):
        resp.headers["X-Request-ID"] = getattr(g, "request_id", "-")
        if hasattr(g, "started"):
            resp.headers["X-Response-Time-ms"] = str(int((time.perf_counter() - g.started) * 1000))
        return resp

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        wants_json = request.path.startswith(JSON_PREFIXES) or request.is_json or (
            "application/json" in (request.headers.get("Accept") or "")
        )
        if not wants_json:
            return err
        return _error_response(err.description or err.name, err.code or 500)

    @app.errorhandler(Exception)
    def _unhandled(err: Exception):
        app.logger.exception("unhandled error on %s %s", request.method, request.path)
        return _error_response("Internal Server Error", 500)

    @app.get("/healthz")
    def healthz():
        return {
            "status": "ok",
            "brand": app.config.get("BRAND_NAME", "HIA"),
            "env": app.config["ENV"],
            "request_id": g.request_id,
        }

    @app.get("/version")
    def version():
        return {"version": os.getenv("GIT_COMMIT", "dev"), "env": app.config["ENV"]}

    @app.get("/.git/<path:_rest>")
    def _no_git(_rest: str):
        return ("Not Found", 404)


def create_app(config_class: Optional[ConfigLike] = None, *, store: Optional[DomainStore] = None) -> Flask:
    """
    Build the app. `store` lets tests (or an embedding process) supply the
    DomainStore; otherwise a fresh, empty one is created.
    """
    app = Flask(__name__, static_folder=None)

    cfg = _pick_config(config_class)
    cfg_obj = import_string(cfg) if isinstance(cfg, str) else cfg
    app.config.from_object(cfg_obj)
    app.config["ENV"] = _runtime_mode(app)
    if app.config["ENV"] == "production":
        app.config["DEBUG"] = False

    app.url_map.strict_slashes = False
    app.json.sort_keys = False  # type: ignore[attr-defined]

    init_hook = getattr(cfg_obj, "init_app", None)
    if callable(init_hook):
        init_hook(app)

    if app.config.get("TRUST_PROXY"):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)
        app.config["PREFERRED_URL_SCHEME"] = "https"

    _configure_logging(app)
    _init_sentry(app)

    init_all_extensions(app, cors_origins=_cors_origins(app.config.get("CORS_ORIGINS")))
    init_store(app, store)

    _register_hooks(app)
    _register_blueprints(app)

    app.logger.info("HIA app ready: env=%s debug=%s", app.config["ENV"], app.debug)
    return app


__all__ = ["create_app", "get_store"]
