"""CORS policy engine: decides and writes CORS response headers.

The engine is built once from :class:`~edge_cors.options.CorsOptions` and then
applied to every request/response pair::

    cors = create_cors(CorsOptions(origin=["https://app.example"]))

    async def handle(request):
        if request.method == "OPTIONS":
            return await cors(request, Response(status=204))
        return await cors(request, Response("hello"))

Only headers are touched. Status codes, bodies and routing stay with the
caller.
"""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from .errors import CorsConfigurationError
from .options import WILDCARD, CorsOptions, MethodsOption, OriginOption

logger = logging.getLogger(__name__)

ORIGIN = "Origin"
VARY = "Vary"
ACCESS_CONTROL_ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ACCESS_CONTROL_ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
ACCESS_CONTROL_ALLOW_METHODS = "Access-Control-Allow-Methods"
ACCESS_CONTROL_ALLOW_HEADERS = "Access-Control-Allow-Headers"
ACCESS_CONTROL_EXPOSE_HEADERS = "Access-Control-Expose-Headers"
ACCESS_CONTROL_MAX_AGE = "Access-Control-Max-Age"
ACCESS_CONTROL_REQUEST_HEADERS = "Access-Control-Request-Headers"

PREFLIGHT_METHOD = "OPTIONS"

_HEADER_LIST_SPLIT = re.compile(r"\s*,\s*")

OriginResolver = Callable[[str], Awaitable["str | None"]]
MethodResolver = Callable[[str], Awaitable[Sequence[str]]]


class HeaderLookup(Protocol):
    def get(self, name: str, default: Any = None) -> Any: ...


class MutableHeaders(HeaderLookup, Protocol):
    def __setitem__(self, name: str, value: str) -> None: ...


class MultiValueHeaders(MutableHeaders, Protocol):
    def getlist(self, name: str) -> list[str]: ...


class RequestLike(Protocol):
    method: str
    headers: HeaderLookup


class ResponseLike(Protocol):
    headers: MutableHeaders


def _uniform_async(func: Callable[[str], Any]) -> Callable[[str], Awaitable[Any]]:
    """Wrap ``func`` so callers always ``await`` its result."""

    if inspect.iscoroutinefunction(func):
        return func

    async def resolver(origin: str) -> Any:
        result = func(origin)
        if inspect.isawaitable(result):
            result = await result
        return result

    return resolver


def _constant(value: Any) -> Callable[[str], Awaitable[Any]]:
    async def resolver(origin: str) -> Any:
        return value

    return resolver


def build_origin_resolver(origin: OriginOption) -> OriginResolver:
    """Collapse an origin option into a single async resolver."""

    if origin is None or origin == WILDCARD:
        return _constant(WILDCARD)
    if isinstance(origin, str):
        allowed = origin

        async def fixed_origin(request_origin: str) -> str | None:
            return request_origin if request_origin == allowed else None

        return fixed_origin
    if callable(origin):
        return _uniform_async(origin)
    if isinstance(origin, (tuple, frozenset, list, set)):
        allowed_origins = frozenset(origin)

        async def listed_origin(request_origin: str) -> str | None:
            return request_origin if request_origin in allowed_origins else None

        return listed_origin
    raise CorsConfigurationError(
        f"Unsupported origin option of type {type(origin).__name__}.", field="origin"
    )


def build_method_resolver(allow_methods: MethodsOption) -> MethodResolver:
    """Collapse an allow-methods option into a single async resolver."""

    if callable(allow_methods):
        return _uniform_async(allow_methods)
    if allow_methods is None:
        return _constant(())
    if isinstance(allow_methods, (tuple, list)):
        return _constant(tuple(allow_methods))
    raise CorsConfigurationError(
        f"Unsupported allow_methods option of type {type(allow_methods).__name__}.",
        field="allow_methods",
    )


def append_header(headers: MutableHeaders | MultiValueHeaders, name: str, value: str) -> None:
    """Add ``value`` to a header, keeping every value already there.

    Collections holding repeated header lines (werkzeug ``Headers``) are folded
    into a single comma-joined line.
    """

    getlist = getattr(headers, "getlist", None)
    existing = ", ".join(getlist(name)) if getlist is not None else headers.get(name)
    headers[name] = f"{existing}, {value}" if existing else value


def split_header_list(value: str) -> list[str]:
    return _HEADER_LIST_SPLIT.split(value)


class CorsPolicyEngine:
    """Applies a resolved CORS policy to request/response pairs.

    The resolved policy is read-only after construction, so one engine can
    serve any number of concurrent requests.
    """

    def __init__(self, options: CorsOptions | None = None) -> None:
        options = options if options is not None else CorsOptions()
        if not isinstance(options, CorsOptions):
            raise CorsConfigurationError(
                f"Expected CorsOptions, got {type(options).__name__}.", field="options"
            )
        if not options.origin_is_explicit:
            logger.warning(
                "No CORS origin policy configured; allowing any origin ('*').",
                extra={"event": "cors.origin_defaulted"},
            )

        self.options = options
        self._find_allow_origin = build_origin_resolver(options.origin)
        self._find_allow_methods = build_method_resolver(options.allow_methods)
        self.vary_on_origin = options.origin_is_explicit and options.origin != WILDCARD

    async def apply(self, request: RequestLike, response: ResponseLike) -> ResponseLike:
        """Write CORS headers for ``request`` onto ``response`` and return it."""

        options = self.options
        headers = response.headers
        request_origin = request.headers.get(ORIGIN) or ""

        allow_origin = await self._find_allow_origin(request_origin)
        if allow_origin:
            headers[ACCESS_CONTROL_ALLOW_ORIGIN] = allow_origin

        if self.vary_on_origin:
            # Overwrites any Vary already on the response; only the request's
            # own Vary value is carried over.
            headers[VARY] = request.headers.get(VARY) or ORIGIN

        if options.credentials:
            headers[ACCESS_CONTROL_ALLOW_CREDENTIALS] = "true"

        if options.expose_headers:
            headers[ACCESS_CONTROL_EXPOSE_HEADERS] = ",".join(options.expose_headers)

        allow_methods = await self._find_allow_methods(request_origin)
        if allow_methods:
            headers[ACCESS_CONTROL_ALLOW_METHODS] = ",".join(allow_methods)

        if request.method == PREFLIGHT_METHOD:
            self._apply_preflight(request, headers)

        return response

    __call__ = apply

    def _apply_preflight(self, request: RequestLike, headers: MutableHeaders) -> None:
        options = self.options
        if options.max_age is not None:
            headers[ACCESS_CONTROL_MAX_AGE] = str(options.max_age)

        allow_headers: Sequence[str] = options.allow_headers
        if not allow_headers:
            requested = request.headers.get(ACCESS_CONTROL_REQUEST_HEADERS)
            if requested:
                allow_headers = split_header_list(requested)

        if allow_headers:
            headers[ACCESS_CONTROL_ALLOW_HEADERS] = ",".join(allow_headers)
            append_header(headers, VARY, ACCESS_CONTROL_REQUEST_HEADERS)


def create_cors(options: CorsOptions | None = None) -> CorsPolicyEngine:
    """Build a :class:`CorsPolicyEngine` from ``options``."""

    return CorsPolicyEngine(options)
