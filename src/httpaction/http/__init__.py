"""
=============================================================================
HTTP LAYER
=============================================================================

The request/response shapes an action works with:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py      │ RequestContext - what the server hands in        │
    │                 │ MalformedBodyError - JSON body that won't parse   │
    ├─────────────────┼───────────────────────────────────────────────────┤
    │ response.py     │ ResponseBuilder - what the action writes into    │
    │                 │ HTTPResponse - what the server gets back          │
    ├─────────────────┼───────────────────────────────────────────────────┤
    │ status_codes.py │ HTTPStatus enum and reason phrases                │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import RequestContext, MalformedBodyError, ROUTE_PARAMS_KEY
from .response import HTTPResponse, ResponseBuilder
from .status_codes import HTTPStatus, reason_phrase

__all__ = [
    # Request side
    "RequestContext",
    "MalformedBodyError",
    "ROUTE_PARAMS_KEY",

    # Response side
    "HTTPResponse",
    "ResponseBuilder",

    # Status codes
    "HTTPStatus",
    "reason_phrase",
]
