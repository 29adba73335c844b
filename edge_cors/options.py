"""Immutable CORS policy options."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from .errors import CorsConfigurationError

WILDCARD = "*"

DEFAULT_ALLOW_METHODS: tuple[str, ...] = ("GET", "HEAD", "PUT", "POST", "DELETE", "PATCH")

OriginCallback = Callable[[str], str | None | Awaitable[str | None]]
MethodsCallback = Callable[[str], Sequence[str] | Awaitable[Sequence[str]]]

OriginOption = str | Iterable[str] | OriginCallback | None
MethodsOption = Sequence[str] | MethodsCallback | None


def _normalize_tokens(value: Iterable[str] | None, *, field: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise CorsConfigurationError(
            f"'{field}' must be a sequence of strings, got {type(value).__name__}.",
            field=field,
        )
    tokens = tuple(value)
    for token in tokens:
        if not isinstance(token, str):
            raise CorsConfigurationError(
                f"'{field}' entries must be strings, got {token!r}.", field=field
            )
    return tokens


@dataclass(frozen=True)
class CorsOptions:
    """Policy configuration consumed by :func:`edge_cors.create_cors`.

    ``origin`` left as ``None`` means "any origin" and behaves exactly like
    ``"*"``. That default is permissive; the engine logs a warning when it is
    used so callers pick a policy on purpose.

    ``allow_methods`` and ``origin`` accept either fixed values or callables
    taking the request ``Origin`` value. Callables may be plain functions or
    coroutine functions.
    """

    origin: OriginOption = None
    allow_methods: MethodsOption = DEFAULT_ALLOW_METHODS
    allow_headers: Sequence[str] = ()
    max_age: int | None = None
    credentials: bool = False
    expose_headers: Sequence[str] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "origin", self._validate_origin(self.origin))
        object.__setattr__(self, "allow_methods", self._validate_methods(self.allow_methods))
        object.__setattr__(
            self, "allow_headers", _normalize_tokens(self.allow_headers, field="allow_headers")
        )
        object.__setattr__(
            self, "expose_headers", _normalize_tokens(self.expose_headers, field="expose_headers")
        )

        if self.max_age is not None and (
            isinstance(self.max_age, bool) or not isinstance(self.max_age, int) or self.max_age < 0
        ):
            raise CorsConfigurationError(
                f"'max_age' must be a non-negative integer, got {self.max_age!r}.",
                field="max_age",
            )
        if not isinstance(self.credentials, bool):
            raise CorsConfigurationError(
                f"'credentials' must be a boolean, got {self.credentials!r}.",
                field="credentials",
            )

    @property
    def origin_is_explicit(self) -> bool:
        return self.origin is not None

    @staticmethod
    def _validate_origin(value: OriginOption) -> OriginOption:
        if value is None or isinstance(value, str) or callable(value):
            return value
        if isinstance(value, (set, frozenset)):
            return frozenset(_normalize_tokens(value, field="origin"))
        return _normalize_tokens(value, field="origin")

    @staticmethod
    def _validate_methods(value: MethodsOption) -> MethodsOption:
        if value is None or callable(value):
            return value
        return _normalize_tokens(value, field="allow_methods")
