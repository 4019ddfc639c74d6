from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import Flask, jsonify, request

from .engine import generate, is_backend_loading, is_backend_ready, start_backend_load
from .presets import BIAS_PRESETS, JOURNEY_PRESETS
from .schema import DEFAULT_MAX_COLORS, ConfigError, parse_config
from .store import RateLimiter, ResponseCache, TTLStore

log = logging.getLogger(__name__)

DEFAULTS: Mapping[str, Any] = {
    "RATE_LIMIT": 10,  # requests per window per client
    "RATE_WINDOW": 60,  # seconds
    "CACHE_TTL": 300,  # seconds
    "CACHE_MAX_ENTRIES": 1024,
    "MAX_COLORS": DEFAULT_MAX_COLORS,
    "BACKEND_PRELOAD": True,
}


def _client_id() -> str:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


# ----------------------------- Flask app ----------------------------------


def create_app(config: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    app.config.update(DEFAULTS)
    app.config.from_prefixed_env("COLOR_JOURNEY")
    if config:
        app.config.update(config)

    cache = ResponseCache(
        TTLStore(app.config["CACHE_TTL"], max_entries=app.config["CACHE_MAX_ENTRIES"])
    )
    limiter = RateLimiter(app.config["RATE_LIMIT"], app.config["RATE_WINDOW"])
    app.extensions["color_journey"] = {"cache": cache, "limiter": limiter}

    if app.config["BACKEND_PRELOAD"]:
        start_backend_load()

    def journey():
        if not limiter.hit(_client_id()):
            return (
                jsonify(
                    {
                        "success": False,
                        "error": "Too many requests. Please wait a minute and try again.",
                    }
                ),
                429,
            )

        try:
            cfg = parse_config(
                request.get_json(silent=True), max_colors=int(app.config["MAX_COLORS"])
            )
        except ConfigError as e:
            return (
                jsonify({"success": False, "error": str(e), "details": e.details}),
                400,
            )

        cached = cache.get(cfg)
        if cached is not None:
            return jsonify({"success": True, "data": cached, "fromCache": True})

        try:
            result = generate(cfg)
        except Exception as exc:
            log.exception("Palette generation failed")
            return (
                jsonify(
                    {
                        "success": False,
                        "error": "Internal server error.",
                        "details": [str(exc)],
                    }
                ),
                500,
            )

        data = result.to_dict()
        cache.put(cfg, data)
        return jsonify({"success": True, "data": data})

    app.add_url_rule("/color-journey", "journey", journey, methods=["POST"])
    app.add_url_rule("/api/color-journey", "api_journey", journey, methods=["POST"])

    @app.route("/color-journey/status")
    def status():
        return jsonify({"ready": is_backend_ready(), "loading": is_backend_loading()})

    @app.route("/color-journey/presets")
    def presets():
        return jsonify({"journeys": JOURNEY_PRESETS, "biases": BIAS_PRESETS})

    return app


if __name__ == "__main__":
    # Production: debug=False; threaded=True is fine for this I/O profile.
    create_app().run(debug=False, threaded=True)
