"""
=============================================================================
REQUEST CONTEXT
=============================================================================

The inbound side of an action: everything the surrounding server knows
about one request, in a shape the action can read without caring which
server produced it.

=============================================================================
WHERE THE CONTEXT COMES FROM
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      REQUEST CONTEXT SOURCES                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   WSGI server ──environ──► RequestContext.from_environ()            │
    │                                    │                                 │
    │   Tests / custom servers ──────────┤  RequestContext(...)           │
    │                                    │                                 │
    │   Router ──route params──────────► context.route_params             │
    │                                    │                                 │
    │                                    ▼                                 │
    │                             Action.call(context)                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The context is owned by the caller and only borrowed by the action for
one call. Its fields are never reassigned; the one piece of mutable
state is the position of the body stream, and read_body() always
rewinds it so later readers see the whole body again.

=============================================================================
HEADER NAMES
=============================================================================

Header names are case-insensitive (RFC 7230), so they are stored with
lowercase keys and looked up through get_header():

    context.get_header("Content-Type")  → context.headers["content-type"]

=============================================================================
"""

import io
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, Mapping, Optional
from urllib.parse import parse_qsl

from .status_codes import HTTPStatus


# Reserved environ key a router uses to hand path parameters to an action.
ROUTE_PARAMS_KEY = "httpaction.route_params"


class MalformedBodyError(Exception):
    """
    Raised when a body declared as JSON cannot be turned into params.

    Carries the status code a server would normally answer with; the
    action itself never converts this into a response.
    """

    def __init__(self, message: str, status_code: int = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class RequestContext:
    """
    One inbound HTTP request as seen by an action.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:        HTTP method ("GET", "POST", ...)
        path:          Request path without the query string
        query_string:  Raw query string, without the leading "?"
        headers:       Header name → value, lowercase names
        body:          Readable, seekable binary stream
        scheme:        "http" or "https"
        server_name:   Host name the request was addressed to
        server_port:   Port as received from the server (str or int)
        route_params:  Parameters extracted by an external router

    =========================================================================
    """

    method: str = "GET"
    path: str = "/"
    query_string: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: BinaryIO = field(default_factory=io.BytesIO, repr=False)
    scheme: str = "http"
    server_name: str = "localhost"
    server_port: Any = 80
    route_params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Normalize header names once so lookups never need .lower()
        normalized = {name.lower(): value for name, value in self.headers.items()}
        object.__setattr__(self, "headers", normalized)
        if isinstance(self.body, (bytes, str)):
            raw = self.body.encode("utf-8") if isinstance(self.body, str) else self.body
            object.__setattr__(self, "body", io.BytesIO(raw))

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> "RequestContext":
        """
        Build a context from a WSGI environ (PEP 3333).

        HTTP_* keys become headers; CONTENT_TYPE and CONTENT_LENGTH are
        not prefixed in WSGI and are picked up separately. Route params
        are read from the reserved ``httpaction.route_params`` key.
        """
        headers = {}
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                headers[key[5:].replace("_", "-").lower()] = value
        if environ.get("CONTENT_TYPE"):
            headers["content-type"] = environ["CONTENT_TYPE"]
        if environ.get("CONTENT_LENGTH"):
            headers["content-length"] = environ["CONTENT_LENGTH"]

        return cls(
            method=environ.get("REQUEST_METHOD", "GET").upper(),
            path=environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "") or "/",
            query_string=environ.get("QUERY_STRING", ""),
            headers=headers,
            body=_rewindable(environ.get("wsgi.input"), headers.get("content-length")),
            scheme=environ.get("wsgi.url_scheme", "http"),
            server_name=environ.get("SERVER_NAME", "localhost"),
            server_port=environ.get("SERVER_PORT", "80"),
            route_params=environ.get(ROUTE_PARAMS_KEY) or {},
        )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def content_type(self) -> str:
        """Raw Content-Type header, parameters included ("" if missing)."""
        return self.headers.get("content-type", "")

    @property
    def accept(self) -> str:
        return self.headers.get("accept", "")

    @property
    def is_json(self) -> bool:
        """Check if the body is declared as JSON (charset etc. allowed)."""
        return "application/json" in self.content_type

    @property
    def query_params(self) -> Dict[str, str]:
        """
        Parsed query string.

        Repeated keys keep the last value ("?a=1&a=2" → {"a": "2"}),
        blank values are kept as "".
        """
        return dict(parse_qsl(self.query_string, keep_blank_values=True))

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value (case-insensitive lookup)."""
        return self.headers.get(name.lower(), default)

    def read_body(self) -> str:
        """
        Read the whole body as text and rewind the stream.

        Raises:
            MalformedBodyError: If the body is not valid UTF-8.
        """
        raw = self.body.read()
        self.body.seek(0)
        if isinstance(raw, str):
            return raw
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedBodyError(f"Request body is not valid UTF-8: {e}") from e


def _rewindable(stream: Optional[BinaryIO], content_length: Optional[str]) -> BinaryIO:
    # wsgi.input is not required to be seekable; buffer it once.
    if stream is None:
        return io.BytesIO()
    if hasattr(stream, "seekable") and stream.seekable():
        return stream
    try:
        length = int(content_length) if content_length else -1
    except ValueError:
        length = -1
    return io.BytesIO(stream.read(length) if length >= 0 else stream.read())
