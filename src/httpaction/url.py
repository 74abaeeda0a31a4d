"""
=============================================================================
ABSOLUTE URLS
=============================================================================

Turns a path such as "/login" into a fully qualified URL using the
scheme, host and port the request arrived on.

=============================================================================
RESOLUTION RULES
=============================================================================

    url                       context                     result
    ─────────────────────     ────────────────────────    ─────────────────────────────
    /login                    http  example.com   80      http://example.com/login
    /login                    http  example.com   3000    http://example.com:3000/login
    /login                    https example.com   443     https://example.com/login
    login                     http  example.com   80      http://example.com/login
    http://test.com/login     (anything)                  http://test.com/login

Each of https/host/port can be overridden by the caller; anything not
overridden comes from the request context. The port is dropped when it
is the default for the scheme (80 for http, 443 for https).

The path itself is never encoded or normalized: only the slashes at the
authority/path boundary are collapsed into one.

=============================================================================
"""

import re
from typing import Any, Optional

from .config import ConfigError
from .http.request import RequestContext

ABSOLUTE_URL_PATTERN = re.compile(r"https?://")

HTTP_PREFIX = "http://"
HTTPS_PREFIX = "https://"
DEFAULT_HTTP_PORT = 80
DEFAULT_HTTPS_PORT = 443


class AbsoluteURL:
    """
    An absolute URL being resolved against a request context.

    Args:
        context: The request the URL is relative to
        url: Relative path or already-absolute URL
        https: Force https (True) or http (False); default from the scheme
        host: Host override; default is the context's server name
        port: Port override (anything int() accepts); default is the
              context's server port

    Raises:
        ConfigError: If the port is not an integer.
    """

    def __init__(
        self,
        context: RequestContext,
        url: Any,
        https: Optional[bool] = None,
        host: Optional[str] = None,
        port: Any = None,
    ):
        self.url = "" if url is None else str(url)
        self.https = (context.scheme == "https") if https is None else bool(https)
        self.host = context.server_name if host is None else host
        self.port = _coerce_port(context.server_port if port is None else port)

    @property
    def prefix(self) -> str:
        return HTTPS_PREFIX if self.https else HTTP_PREFIX

    @property
    def default_port(self) -> int:
        return DEFAULT_HTTPS_PORT if self.https else DEFAULT_HTTP_PORT

    @property
    def authority(self) -> str:
        """host, or host:port when the port isn't the scheme default."""
        if self.port == self.default_port:
            return self.host
        return f"{self.host}:{self.port}"

    def to_absolute(self) -> str:
        if ABSOLUTE_URL_PATTERN.match(self.url):
            return self.url
        return join_path(self.prefix + self.authority, self.url)


def absolute_url(
    context: RequestContext,
    url: Any,
    https: Optional[bool] = None,
    host: Optional[str] = None,
    port: Any = None,
) -> str:
    """
    Resolve ``url`` into an absolute URL.

    Already-absolute http(s) URLs are returned unchanged.

    Raises:
        ConfigError: If the port is not an integer.
    """
    return AbsoluteURL(context, url, https=https, host=host, port=port).to_absolute()


def join_path(base: str, path: str) -> str:
    """
    Join two URL parts with exactly one slash between them.

        >>> join_path("http://example.com", "/login")
        'http://example.com/login'
        >>> join_path("http://example.com/", "login")
        'http://example.com/login'
    """
    return base.rstrip("/") + "/" + path.lstrip("/")


def _coerce_port(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid port: {value!r}. Must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid port: {value!r}. Must be an integer.") from e
