"""
=============================================================================
HTTPACTION
=============================================================================

Single-endpoint request handlers on top of a plain request/response
layer. One Action subclass per endpoint:

    from httpaction import Action, RequestContext

    class Hello(Action):
        def respond(self):
            return {"hello": self.params.get("name", "world")}

    response = Hello.call(RequestContext(query_string="name=Ada"))
    response.status        # 200
    response.text          # '{"hello":"Ada"}'

Package layout:

    httpaction/
    ├── action.py      Action: filters, respond(), response helpers
    ├── filters.py     FilterChain: ordered before/after filter names
    ├── url.py         absolute_url(): relative path → absolute URL
    ├── config.py      ActionConfig, JSONCodec, logging setup
    ├── wsgi.py        WSGIAdapter: serve an action from any WSGI server
    └── http/          RequestContext, ResponseBuilder, HTTPResponse

Routing, serving, sessions and templating are left to other libraries.

=============================================================================
"""

__version__ = "0.6.0"

from .action import Action, BodyKind, DEFAULT_RESPONSE, classify_body
from .config import (
    ActionConfig,
    ConfigError,
    JSONCodec,
    JSONSerializer,
    ParamsPrecedence,
    configure_logging,
)
from .filters import FilterChain
from .http import (
    HTTPResponse,
    HTTPStatus,
    MalformedBodyError,
    RequestContext,
    ResponseBuilder,
    ROUTE_PARAMS_KEY,
)
from .url import AbsoluteURL, absolute_url
from .wsgi import WSGIAdapter

__all__ = [
    # Core
    "Action",
    "BodyKind",
    "DEFAULT_RESPONSE",
    "classify_body",
    "FilterChain",

    # Configuration
    "ActionConfig",
    "ConfigError",
    "JSONCodec",
    "JSONSerializer",
    "ParamsPrecedence",
    "configure_logging",

    # HTTP
    "HTTPResponse",
    "HTTPStatus",
    "MalformedBodyError",
    "RequestContext",
    "ResponseBuilder",
    "ROUTE_PARAMS_KEY",

    # URLs
    "AbsoluteURL",
    "absolute_url",

    # Serving
    "WSGIAdapter",
]
