"""Flask integration for the CORS policy engine."""

from __future__ import annotations

import logging

from flask import Flask, Response, make_response, request

from .engine import ACCESS_CONTROL_ALLOW_ORIGIN, ORIGIN, PREFLIGHT_METHOD, CorsPolicyEngine
from .logging import cors_log_extra, setup_logging, to_bool
from .options import CorsOptions
from .schemas import load_cors_options

logger = logging.getLogger(__name__)

CORS_CONFIG_FLAG = "_cors_configured"
EXTENSION_KEY = "cors"


def init_cors(app: Flask, options: CorsOptions | None = None) -> CorsPolicyEngine | None:
    """Attach CORS handling to ``app``.

    Options come from ``options`` when given, otherwise from the ``CORS_*``
    keys of ``app.config``. Nothing is installed when no origins are
    configured. Root logging is set up first when ``LOG_SETUP_ENABLED`` is
    true. Preflight requests are answered with an empty 204 and every response
    is passed through the engine.
    """

    if app.config.get(CORS_CONFIG_FLAG):
        return app.extensions.get(EXTENSION_KEY)

    if to_bool(app.config.get("LOG_SETUP_ENABLED", False)):
        setup_logging(app)

    if options is None:
        options = load_cors_options(app.config)
    if options is None:
        logger.info("CORS disabled: no allowed origins configured.")
        return None

    engine = CorsPolicyEngine(options)

    @app.before_request
    def short_circuit_preflight():
        if request.method != PREFLIGHT_METHOD or request.headers.get(ORIGIN) is None:
            return None
        return make_response("", 204)

    @app.after_request
    async def apply_cors_headers(response: Response):
        await engine.apply(request, response)
        preflight = request.method == PREFLIGHT_METHOD
        logger.debug(
            "CORS preflight handled" if preflight else "CORS headers applied",
            extra=cors_log_extra(
                event="cors.preflight" if preflight else "cors.applied",
                method=request.method,
                origin=request.headers.get(ORIGIN),
                allowed_origin=response.headers.get(ACCESS_CONTROL_ALLOW_ORIGIN),
                status=response.status_code,
                preflight=preflight,
            ),
        )
        return response

    app.extensions[EXTENSION_KEY] = engine
    app.config[CORS_CONFIG_FLAG] = True
    return engine
