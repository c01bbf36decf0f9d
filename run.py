#!/usr/bin/env python3
"""
Development launcher for the HIA website API.

    ./run.py                          development, debug + reloader
    ./run.py --env production --no-debug --log-style json
    gunicorn "wsgi:app"               production (see wsgi.py)

The domain store is in memory, so totals reset on restart and only a single
worker process sees consistent data.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_ALIASES = {
    "dev": "development",
    "local": "development",
    "development": "development",
    "test": "testing",
    "testing": "testing",
    "prod": "production",
    "production": "production",
}

CONFIG_PATHS = {
    "development": "hia.config.DevelopmentConfig",
    "testing": "hia.config.TestingConfig",
    "production": "hia.config.ProductionConfig",
}


def _flag(name: str) -> Optional[bool]:
    raw = (os.getenv(name) or "").strip().lower()
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return None


def canonical_env(name: Optional[str]) -> str:
    key = (name or "").strip().lower()
    return ENV_ALIASES.get(key, key or "development")


def normalize_config_path(value: Optional[str], *, env_hint: str) -> str:
    """Map --config / FLASK_CONFIG (an alias or a dotted path) to a config class path."""
    value = (value or "").strip()
    if value:
        return CONFIG_PATHS.get(canonical_env(value), value)
    return CONFIG_PATHS.get(canonical_env(env_hint), CONFIG_PATHS["development"])


def load_env_files(env: str) -> list[Path]:
    """Load .env then .env.<env>; variables already set in the process win."""
    found = [p for p in (Path(".env"), Path(f".env.{env}")) if p.is_file()]
    for path in found:
        load_dotenv(path, override=False)
    return found


# ----------------------------
# Logging
# ----------------------------
class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "rid": getattr(record, "request_id", "-"),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(debug: bool, style: str) -> None:
    # hia.create_app() attaches the request-id filter and the plain format
    handler = logging.StreamHandler(sys.stdout)
    if style == "json":
        handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if debug else logging.INFO)


# ----------------------------
# CLI
# ----------------------------
@dataclass(frozen=True)
class RunnerConfig:
    env: str
    config_path: str
    host: str
    port: int
    debug: bool
    use_reloader: bool
    log_style: str
    routes_out: Optional[Path]


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run the HIA website API.")
    p.add_argument("--env", choices=sorted(CONFIG_PATHS))
    p.add_argument("--config", help="dotted config class path or alias (dev/test/prod)")
    p.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    p.add_argument("--port", type=int, default=int(os.getenv("PORT", "5000")))
    p.add_argument("--debug", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--no-reload", action="store_true")
    p.add_argument("--log-style", choices=["plain", "json"], default=os.getenv("LOG_STYLE", "plain"))
    p.add_argument("--routes-out", type=Path, help="write the route table as JSON")
    return p.parse_args(argv)


def make_runner_config(argv: Optional[list[str]] = None) -> RunnerConfig:
    args = parse_args(argv)
    env = canonical_env(args.env or os.getenv("ENV") or os.getenv("APP_ENV") or os.getenv("FLASK_ENV"))

    # --debug/--no-debug, then FLASK_DEBUG, then on outside production
    debug = args.debug
    if debug is None:
        debug = _flag("FLASK_DEBUG")
    if debug is None:
        debug = env != "production"

    return RunnerConfig(
        env=env,
        config_path=normalize_config_path(args.config or os.getenv("FLASK_CONFIG"), env_hint=env),
        host=args.host,
        port=args.port,
        debug=bool(debug),
        use_reloader=bool(debug) and env == "development" and not args.no_reload,
        log_style=args.log_style,
        routes_out=args.routes_out,
    )


def route_rows(app) -> list[dict]:
    rows = []
    for rule in sorted(app.url_map.iter_rules(), key=str):
        rows.append(
            {
                "rule": str(rule),
                "endpoint": rule.endpoint,
                "methods": sorted((rule.methods or set()) - {"HEAD", "OPTIONS"}),
            }
        )
    return rows


def main(argv: Optional[list[str]] = None) -> None:
    cfg = make_runner_config(argv)
    load_env_files(cfg.env)
    os.environ["ENV"] = cfg.env
    os.environ["FLASK_DEBUG"] = "1" if cfg.debug else "0"

    setup_logging(cfg.debug, cfg.log_style)
    log = logging.getLogger("hia.run")

    from hia import create_app

    try:
        app = create_app(cfg.config_path)
    except RuntimeError as exc:
        log.error("refusing to start: %s", exc)
        raise SystemExit(1)

    if cfg.routes_out:
        cfg.routes_out.write_text(json.dumps(route_rows(app), indent=2), encoding="utf-8")
        log.info("route table written to %s", cfg.routes_out)

    log.info("serving %s (%s) on %s:%s", cfg.config_path, cfg.env, cfg.host, cfg.port)
    app.run(host=cfg.host, port=cfg.port, debug=cfg.debug, use_reloader=cfg.use_reloader)


if __name__ == "__main__":
    main()
