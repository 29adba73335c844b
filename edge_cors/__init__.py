"""Per-request CORS header decisions for lightweight request handlers."""

from __future__ import annotations

from .engine import CorsPolicyEngine, create_cors
from .errors import CorsConfigurationError, CorsError
from .middleware import init_cors
from .options import DEFAULT_ALLOW_METHODS, WILDCARD, CorsOptions
from .schemas import CorsSettingsSchema, load_cors_options

__all__ = [
    "CorsConfigurationError",
    "CorsError",
    "CorsOptions",
    "CorsPolicyEngine",
    "CorsSettingsSchema",
    "DEFAULT_ALLOW_METHODS",
    "WILDCARD",
    "create_cors",
    "init_cors",
    "load_cors_options",
]
