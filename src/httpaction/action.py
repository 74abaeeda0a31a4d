"""
=============================================================================
ACTION
=============================================================================

One class per endpoint, one instance per request. An action turns a
RequestContext into an HTTPResponse:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       ACTION LIFECYCLE                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Action.call(context)                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   resolve params ── query < route < JSON body                       │
    │        │                                                             │
    │        ▼                                                             │
    │   log call, Content-Type: text/html                                 │
    │        │                                                             │
    │        ▼                                                             │
    │   before filters ── in order; stop at the first one that           │
    │        │            writes to the response                           │
    │        ▼                                                             │
    │   respond() ─────── only if nothing has answered yet                │
    │        │                                                             │
    │        ▼                                                             │
    │   after filters ─── always, all of them                             │
    │        │                                                             │
    │        ▼                                                             │
    │   response.finish() → HTTPResponse                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
USAGE
=============================================================================

    class ShowUser(Action):
        def respond(self):
            user = find_user(self.params["id"])
            if user is None:
                return self.not_found()
            return {"id": user.id, "name": user.name}     # → JSON

    class Dashboard(Action):
        def login_required(self):
            if not self.context.get_header("Authorization"):
                self.redirect_to("/login")                 # halts the chain

        def respond(self):
            return "<h1>Dashboard</h1>"                    # → text/html

    Dashboard.before_filter("login_required")

    response = Dashboard.call(context)

Errors raised by filters or respond() propagate to the caller unchanged.
Turning them into a 500 is the server's job.

=============================================================================
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from .config import ActionConfig, ParamsPrecedence, dump_pretty, parse_precedence
from .filters import FilterChain
from .http.request import MalformedBodyError, RequestContext
from .http.response import HTTPResponse, ResponseBuilder
from .http.status_codes import HTTPStatus
from .url import absolute_url

CONTENT_TYPE = "Content-Type"
LOCATION = "Location"
TEXT_HTML = "text/html"
APPLICATION_JSON = "application/json"
DEFAULT_RESPONSE = "Default httpaction.Action Response"


class BodyKind(Enum):
    """How a value returned from respond() ends up in the response."""

    TEXT = "text"        # str/bytes, written as a single chunk
    CHUNKS = "chunks"    # list/tuple of str/bytes, written in order
    DATA = "data"        # anything else, serialized as JSON


def classify_body(value: Any) -> BodyKind:
    if isinstance(value, (str, bytes, bytearray)):
        return BodyKind.TEXT
    if isinstance(value, (list, tuple)) and all(
        isinstance(part, (str, bytes, bytearray)) for part in value
    ):
        return BodyKind.CHUNKS
    return BodyKind.DATA


class Action:
    """
    Base class for a single-endpoint request handler.

    Subclasses override respond() and register filters by method name.
    Class-level configuration (filters, logger, JSON serializer, params
    precedence) is copied into every subclass when it is created.
    """

    _config: ActionConfig = ActionConfig()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._config = cls._config.derive()

    def __init__(self, context: RequestContext):
        self.context = context
        self.response = ResponseBuilder()
        self._params: Optional[Mapping[str, Any]] = None

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    @classmethod
    def call(cls, context: RequestContext) -> HTTPResponse:
        """Handle one request: build an instance and dispatch it."""
        return cls(context).dispatch()

    @classmethod
    def wsgi_app(cls):
        """This action as a WSGI application."""
        from .wsgi import WSGIAdapter

        return WSGIAdapter(cls)

    def dispatch(self) -> HTTPResponse:
        """
        Generate the response for this request.

        You typically won't override or call this directly; override
        respond() and register filters instead.
        """
        self.resolve_params()
        self.log_call()
        self.set_default_headers()
        self.run_before_filters()
        self.run_respond()
        self.run_after_filters()
        return self.finish_response()

    def respond(self) -> Any:
        """
        Produce the response body. Override this.

        Either write to self.response (or use a helper such as json() or
        redirect_to()), or return a value: str/bytes and lists of them are
        written as-is, anything else is sent as JSON. The return value is
        ignored if the response was already written to.
        """
        return DEFAULT_RESPONSE

    # =========================================================================
    # REQUEST DATA
    # =========================================================================

    @property
    def params(self) -> Mapping[str, Any]:
        """
        Query, route and JSON body params merged into one read-only mapping.

        Resolved once per action, before the filters run.

        Raises:
            MalformedBodyError: If a JSON body can't be parsed.
        """
        if self._params is None:
            self.resolve_params()
        return self._params

    def resolve_params(self) -> Mapping[str, Any]:
        if self._params is not None:
            return self._params

        params: Dict[str, Any] = dict(self.context.query_params)
        route_params = dict(self.context.route_params or {})
        body_params = self._json_body_params()

        if self._config.params_precedence is ParamsPrecedence.ROUTE_WINS:
            params.update(body_params)
            params.update(route_params)
        else:
            params.update(route_params)
            params.update(body_params)

        self._params = MappingProxyType(params)
        return self._params

    def _json_body_params(self) -> Dict[str, Any]:
        if not self.context.is_json:
            return {}
        body = self.context.read_body()
        if not body.strip():
            return {}
        try:
            data = self._config.json_serializer.load(body)
        except ValueError as e:
            raise MalformedBodyError(f"Invalid JSON body: {e}") from e
        if not isinstance(data, dict):
            raise MalformedBodyError(
                f"JSON body must be an object to merge into params, got {type(data).__name__}"
            )
        return data

    @property
    def format(self) -> str:
        """
        Requested response format.

        The "format" param if present (even when blank), "json" when
        Accept is exactly application/json, otherwise "html".
        """
        requested = self.params.get("format")
        if requested is not None:
            return requested
        if self.context.accept == APPLICATION_JSON:
            return "json"
        return "html"

    # =========================================================================
    # RESPONSE HELPERS
    # =========================================================================

    def json(self, data: Any, status: Optional[int] = None) -> str:
        """
        Write ``data`` as JSON and set the Content-Type.

        Args:
            data: Anything the JSON serializer accepts
            status: Response status code, if not 200

        Returns:
            The JSON string written to the response
        """
        return self._write_json(self._config.json_serializer.dump(data), status)

    def pretty_json(self, data: Any, status: Optional[int] = None) -> str:
        """
        Like json() but indented for humans.

        Serializers whose dump() takes ``pretty=True`` (like JSONCodec)
        indent themselves; output of any other serializer is re-indented.
        """
        return self._write_json(dump_pretty(self._config.json_serializer, data), status)

    def _write_json(self, text: str, status: Optional[int]) -> str:
        self.response[CONTENT_TYPE] = APPLICATION_JSON
        if status is not None:
            self.response.status = status
        self.response.write(text)
        return text

    def redirect_to(
        self,
        url: str,
        https: Optional[bool] = None,
        host: Optional[str] = None,
        port: Any = None,
    ) -> str:
        """
        Respond with a 302 redirect.

        Relative URLs are made absolute first, see absolute_url().

        Returns:
            The absolute URL redirected to
        """
        full_url = self.absolute_url(url, https=https, host=host, port=port)
        self.response[LOCATION] = full_url
        self.respond_with(HTTPStatus.FOUND)
        return full_url

    def not_found(self) -> None:
        self.respond_with(HTTPStatus.NOT_FOUND)

    def forbidden(self) -> None:
        self.respond_with(HTTPStatus.FORBIDDEN)

    def respond_with(self, status_code: int) -> None:
        """
        Answer with a status code and an empty body.

        Counts as a response: later before filters and respond() are
        skipped.
        """
        self.response.status = status_code
        self.response.write("")

    def absolute_url(
        self,
        url: str,
        https: Optional[bool] = None,
        host: Optional[str] = None,
        port: Any = None,
    ) -> str:
        """
        Absolute form of ``url`` for this request.

        Args:
            url: Relative path or absolute URL (returned unchanged)
            https: Use https; default from the request scheme
            host: Host; default is the request's server name
            port: Port; default is the request's server port

        Raises:
            ConfigError: If the port is not an integer.
        """
        return absolute_url(self.context, url, https=https, host=host, port=port)

    # =========================================================================
    # LIFECYCLE STEPS
    # =========================================================================

    @property
    def logger(self):
        return self._config.logger

    def log_call(self) -> None:
        if self.logger is not None and self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                "%s %s format: %r, params: %r",
                type(self).__name__, self.context.method, self.format, dict(self.params),
            )

    def set_default_headers(self) -> None:
        self.response[CONTENT_TYPE] = TEXT_HTML

    def run_before_filters(self) -> None:
        for name in self._config.filters.before:
            self._log("Running %s before filter", name)
            getattr(self, name)()
            if not self.response.is_empty:
                self._log("%s responded, halting filter chain", name)
                return

    def run_respond(self) -> None:
        if not self.response.is_empty:
            return

        body = self.respond()

        if not self.response.is_empty:
            return

        kind = classify_body(body)
        if kind is BodyKind.DATA:
            self.json(body)
        else:
            self.response.write(body)

    def run_after_filters(self) -> None:
        for name in self._config.filters.after:
            self._log("Running %s after filter", name)
            getattr(self, name)()

    def finish_response(self) -> HTTPResponse:
        return self.response.finish()

    def _log(self, message: str, *args: Any) -> None:
        if self.logger is not None:
            self.logger.debug(message, *args)

    # =========================================================================
    # CLASS-LEVEL CONFIGURATION
    # =========================================================================

    @classmethod
    def configure(
        cls,
        logger: Any = ...,
        json_serializer: Any = ...,
        params_precedence: Any = ...,
    ) -> ActionConfig:
        """
        Change this class's configuration.

        Only arguments that are passed are changed; ``logger=None``
        turns tracing off. Subclasses created afterwards inherit the new
        values.

        Raises:
            ConfigError: If the resulting configuration is invalid.
        """
        config = cls._config.derive()
        if logger is not ...:
            config.logger = logger
        if json_serializer is not ...:
            config.json_serializer = json_serializer
        if params_precedence is not ...:
            config.params_precedence = parse_precedence(params_precedence)
        config.validate()
        cls._config = config
        return config

    @classmethod
    def config(cls) -> ActionConfig:
        return cls._config

    @classmethod
    def filter_chain(cls) -> FilterChain:
        return cls._config.filters

    @classmethod
    def before_filters(cls) -> List[str]:
        """Before filter names in run order (a copy)."""
        return list(cls._config.filters.before)

    @classmethod
    def after_filters(cls) -> List[str]:
        """After filter names in run order (a copy)."""
        return list(cls._config.filters.after)

    @classmethod
    def before_filter(cls, *names: str) -> None:
        for name in names:
            cls._config.filters.add_before(name)

    @classmethod
    def after_filter(cls, *names: str) -> None:
        for name in names:
            cls._config.filters.add_after(name)

    @classmethod
    def skip_before_filter(cls, *names: str) -> None:
        for name in names:
            cls._config.filters.skip_before(name)

    @classmethod
    def skip_after_filter(cls, *names: str) -> None:
        for name in names:
            cls._config.filters.skip_after(name)
