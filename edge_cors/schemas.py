"""Marshmallow schema loading CORS options from flat configuration mappings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, pre_load
from marshmallow.validate import Range

from .errors import CorsConfigurationError
from .options import DEFAULT_ALLOW_METHODS, WILDCARD, CorsOptions


class CommaSeparated(fields.Field):
    """List of tokens given either as ``"a, b"`` or as an iterable of strings."""

    default_error_messages = {"invalid": "Expected a comma-separated string or a list of strings."}

    def _deserialize(self, value, attr, data, **kwargs) -> list[str]:
        if isinstance(value, str):
            candidates: Iterable[Any] = value.split(",")
        elif isinstance(value, Iterable):
            candidates = value
        else:
            raise self.make_error("invalid")

        normalized: list[str] = []
        for item in candidates:
            if item is not None and not isinstance(item, str):
                raise self.make_error("invalid")
            token = (item or "").strip()
            if token:
                normalized.append(token)
        return normalized


class CorsSettingsSchema(Schema):
    """Reads the ``CORS_*`` keys of an application config."""

    class Meta:
        unknown = EXCLUDE

    allowed_origins = CommaSeparated(load_default=list, data_key="CORS_ALLOWED_ORIGINS")
    allowed_methods = CommaSeparated(
        load_default=lambda: list(DEFAULT_ALLOW_METHODS), data_key="CORS_ALLOWED_METHODS"
    )
    allowed_headers = CommaSeparated(load_default=list, data_key="CORS_ALLOWED_HEADERS")
    expose_headers = CommaSeparated(load_default=list, data_key="CORS_EXPOSE_HEADERS")
    max_age = fields.Integer(
        load_default=None,
        allow_none=True,
        strict=False,
        validate=Range(min=0),
        data_key="CORS_MAX_AGE",
    )
    allow_credentials = fields.Boolean(load_default=False, data_key="CORS_ALLOW_CREDENTIALS")

    @pre_load
    def drop_blank_values(self, data, **kwargs):
        return {
            key: value
            for key, value in data.items()
            if not (isinstance(value, str) and not value.strip())
        }

    @post_load
    def make_options(self, data, **kwargs) -> CorsOptions | None:
        origins = data["allowed_origins"]
        if not origins:
            return None

        return CorsOptions(
            origin=WILDCARD if WILDCARD in origins else origins,
            allow_methods=data["allowed_methods"],
            allow_headers=data["allowed_headers"],
            max_age=data["max_age"],
            credentials=data["allow_credentials"],
            expose_headers=data["expose_headers"],
        )


def load_cors_options(config: Mapping[str, Any]) -> CorsOptions | None:
    """Build :class:`CorsOptions` from ``config``.

    Returns ``None`` when no origins are configured, which callers treat as
    "CORS disabled".

    Raises:
        CorsConfigurationError: If any ``CORS_*`` value is invalid.
    """

    relevant = {key: value for key, value in config.items() if str(key).startswith("CORS_")}
    try:
        return CorsSettingsSchema().load(relevant)
    except ValidationError as exc:
        field = next(iter(exc.messages), None) if isinstance(exc.messages, dict) else None
        raise CorsConfigurationError(
            f"Invalid CORS configuration: {exc.messages}",
            field=str(field) if field else None,
            payload={"errors": exc.messages},
        ) from exc
