"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest
from werkzeug.test import EnvironBuilder
from werkzeug.wrappers import Request, Response

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


@pytest.fixture()
def make_request() -> Callable[..., Request]:
    """Build a werkzeug request with the given method and headers."""

    def _factory(method: str = "GET", headers: Mapping[str, str] | None = None) -> Request:
        builder = EnvironBuilder(path="/resource", method=method, headers=dict(headers or {}))
        try:
            return builder.get_request()
        finally:
            builder.close()

    return _factory


@pytest.fixture()
def make_response() -> Callable[[], Response]:
    """Build an empty response for the engine to decorate."""

    def _factory() -> Response:
        return Response(status=204)

    return _factory


@pytest.fixture()
def apply_cors(make_request, make_response):
    """Run an engine against a fresh request/response pair and return the response."""

    def _apply(engine, method: str = "GET", headers: Mapping[str, str] | None = None):
        request = make_request(method, headers)
        return asyncio.run(engine.apply(request, make_response()))

    return _apply
