"""
pytest configuration and fixtures.
"""

import io
import logging
import os
from typing import Callable

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpaction import Action, HTTPResponse, RequestContext


# HTTPACTION_TEST_LOGGER=stdout traces every action to stdout,
# HTTPACTION_TEST_LOGGER=<path> to a log file.
_test_logger = os.environ.get("HTTPACTION_TEST_LOGGER")
if _test_logger:
    _logger = logging.getLogger("httpaction.tests")
    _logger.setLevel(logging.DEBUG)
    if _test_logger.lower() == "stdout":
        _logger.addHandler(logging.StreamHandler(sys.stdout))
    else:
        log_file = Path(_test_logger).expanduser().resolve()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _logger.addHandler(logging.FileHandler(log_file))
    Action.configure(logger=_logger)


DEFAULT_HOST = "example.com"
DEFAULT_PORT = 80


def make_context(
    method: str = "GET",
    path: str = "/",
    query_string: str = "",
    headers: dict = None,
    body: bytes = b"",
    scheme: str = "http",
    server_name: str = DEFAULT_HOST,
    server_port="80",
    route_params: dict = None,
) -> RequestContext:
    """Request context for example.com:80 unless told otherwise."""
    all_headers = {"Host": DEFAULT_HOST, "Accept": "*/*"}
    all_headers.update(headers or {})
    return RequestContext(
        method=method,
        path=path,
        query_string=query_string,
        headers=all_headers,
        body=io.BytesIO(body),
        scheme=scheme,
        server_name=server_name,
        server_port=server_port,
        route_params=route_params or {},
    )


@pytest.fixture
def context_factory() -> Callable[..., RequestContext]:
    """Factory for request contexts with example.com defaults."""
    return make_context


@pytest.fixture
def get() -> Callable[..., HTTPResponse]:
    """Run an action class against a GET request."""
    def _get(app, path: str = "/", **overrides) -> HTTPResponse:
        return app.call(make_context(method="GET", path=path, **overrides))
    return _get


@pytest.fixture
def post() -> Callable[..., HTTPResponse]:
    """Run an action class against a POST request."""
    def _post(app, path: str = "/", **overrides) -> HTTPResponse:
        return app.call(make_context(method="POST", path=path, **overrides))
    return _post


@pytest.fixture
def sample_environ() -> dict:
    """Minimal WSGI environ for GET /users/42?page=2 on example.com."""
    return {
        "REQUEST_METHOD": "GET",
        "SCRIPT_NAME": "",
        "PATH_INFO": "/users/42",
        "QUERY_STRING": "page=2",
        "SERVER_NAME": DEFAULT_HOST,
        "SERVER_PORT": str(DEFAULT_PORT),
        "HTTP_HOST": DEFAULT_HOST,
        "HTTP_ACCEPT": "application/json",
        "wsgi.input": io.BytesIO(b""),
        "wsgi.url_scheme": "http",
    }
