"""Error types raised by the CORS policy engine."""

from __future__ import annotations

from typing import Any


class CorsError(Exception):
    """Base class for CORS policy errors."""


class CorsConfigurationError(CorsError, ValueError):
    """Raised when CORS options cannot be turned into a policy."""

    def __init__(
        self, message: str, *, field: str | None = None, payload: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.payload = payload or {}
        if field and "field" not in self.payload:
            self.payload["field"] = field
