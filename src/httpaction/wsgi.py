"""
=============================================================================
WSGI BRIDGE
=============================================================================

Lets any WSGI server (gunicorn, waitress, wsgiref, ...) serve an action:

    from wsgiref.simple_server import make_server

    app = ShowUser.wsgi_app()          # or WSGIAdapter(ShowUser)
    make_server("127.0.0.1", 8080, app).serve_forever()

    ┌──────────────┐  environ   ┌──────────────┐  context   ┌──────────────┐
    │ WSGI server  │ ─────────► │ WSGIAdapter  │ ─────────► │ Action.call  │
    │              │ ◄───────── │              │ ◄───────── │              │
    └──────────────┘  status,   └──────────────┘ HTTPResponse└──────────────┘
                      headers,
                      body chunks

A router in front of the adapter passes path parameters through the
``httpaction.route_params`` environ key.

Exceptions from the action are not caught here; WSGI servers answer
them with a 500.

=============================================================================
"""

import logging
from typing import Any, Callable, Iterable, Mapping

from .http.request import RequestContext

logger = logging.getLogger(__name__)

StartResponse = Callable[..., Any]


class WSGIAdapter:
    """WSGI application wrapping one action class."""

    def __init__(self, action_cls):
        self.action_cls = action_cls

    def __call__(self, environ: Mapping[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        context = RequestContext.from_environ(environ)
        response = self.action_cls.call(context)

        status = response.status_line.split(" ", 1)[1]
        logger.debug(f"{context.method} {context.path} → {self.action_cls.__name__} {status}")

        start_response(status, list(response.headers.items()))
        return response.body

    def __repr__(self) -> str:
        return f"WSGIAdapter({self.action_cls.__name__})"
