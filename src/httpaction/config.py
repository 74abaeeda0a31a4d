"""
=============================================================================
ACTION CONFIGURATION
=============================================================================

Per-class configuration for actions: logger, JSON serializer, params
precedence and the filter chain.

=============================================================================
HOW CONFIGURATION IS INHERITED
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Action._config            ActionConfig()         (set at boot)    │
    │        │                                                             │
    │        │ derive() when a subclass is created                         │
    │        ▼                                                             │
    │   MyAction._config          copy of the parent's config              │
    │                                                                      │
    │   MyAction.configure(logger=...) changes MyAction and every         │
    │   subclass created AFTER the call; never the parent.                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Configure the base class once at boot, before defining actions:

    configure_logging("DEBUG")
    Action.configure(logger=logging.getLogger("myapp.actions"))

or from the environment:

    Action.configure(**ActionConfig.from_env().options())

=============================================================================
ENVIRONMENT VARIABLES
=============================================================================

    HTTPACTION_LOG_LEVEL          Level for the "httpaction" logger
    HTTPACTION_LOGGER             Name of the logger actions trace to
                                  (unset = no action tracing)
    HTTPACTION_PARAMS_PRECEDENCE  "body_wins" (default) or "route_wins"

=============================================================================
"""

import inspect
import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol

from .filters import FilterChain


class ConfigError(ValueError):
    """Raised for configuration values that cannot be used."""


class ParamsPrecedence(str, Enum):
    """
    Which source wins when route params and the JSON body share a key.

    Query params always lose to both.
    """

    BODY_WINS = "body_wins"      # query < route < body
    ROUTE_WINS = "route_wins"    # query < body < route


class JSONSerializer(Protocol):
    """Anything with dump/load can serialize action JSON."""

    def dump(self, value: Any) -> str:
        ...

    def load(self, text: str) -> Any:
        ...


class JSONCodec:
    """
    Default serializer built on the standard library json module.

    Compact output matches what most JSON APIs send:

        >>> JSONCodec().dump({"hello": "world"})
        '{"hello":"world"}'
    """

    def dump(self, value: Any, pretty: bool = False) -> str:
        if pretty:
            return json.dumps(value, indent=2, ensure_ascii=False)
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)

    def load(self, text: str) -> Any:
        return json.loads(text)


def dump_pretty(serializer: JSONSerializer, value: Any) -> str:
    """
    Serialize ``value`` as indented JSON with any serializer.

    A serializer whose dump() accepts ``pretty`` is asked to indent;
    otherwise its compact output is loaded back and re-indented.
    """
    try:
        accepts_pretty = "pretty" in inspect.signature(serializer.dump).parameters
    except (TypeError, ValueError):
        accepts_pretty = False

    if accepts_pretty:
        return serializer.dump(value, pretty=True)
    return json.dumps(serializer.load(serializer.dump(value)), indent=2, ensure_ascii=False)


@dataclass
class ActionConfig:
    """
    Configuration owned by one action class.

    Attributes:
        logger: Where actions trace their lifecycle. None disables it.
        json_serializer: Used by json(), pretty_json() and params parsing.
        params_precedence: Route params vs JSON body on key collisions.
        filters: Before/after filter names, in run order.
    """

    logger: Optional[logging.Logger] = None
    json_serializer: JSONSerializer = field(default_factory=JSONCodec)
    params_precedence: ParamsPrecedence = ParamsPrecedence.BODY_WINS
    filters: FilterChain = field(default_factory=FilterChain)

    def derive(self) -> "ActionConfig":
        """
        Copy for a subclass.

        The filter chain is copied by value; logger and serializer are
        shared objects and copied by reference.
        """
        return ActionConfig(
            logger=self.logger,
            json_serializer=self.json_serializer,
            params_precedence=self.params_precedence,
            filters=self.filters.copy(),
        )

    def options(self) -> Dict[str, Any]:
        """Settings as keyword arguments for Action.configure()."""
        return {
            "logger": self.logger,
            "json_serializer": self.json_serializer,
            "params_precedence": self.params_precedence,
        }

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigError: If a value cannot be used.
        """
        serializer = self.json_serializer
        if not (callable(getattr(serializer, "dump", None))
                and callable(getattr(serializer, "load", None))):
            raise ConfigError(
                f"json_serializer must provide dump() and load(), got {serializer!r}"
            )
        if not isinstance(self.params_precedence, ParamsPrecedence):
            raise ConfigError(f"Invalid params_precedence: {self.params_precedence!r}")

    @classmethod
    def from_env(cls) -> "ActionConfig":
        """
        Create configuration from environment variables.

        Also applies HTTPACTION_LOG_LEVEL through configure_logging().
        """
        level = os.getenv("HTTPACTION_LOG_LEVEL")
        if level:
            configure_logging(level)

        logger_name = os.getenv("HTTPACTION_LOGGER")
        precedence = os.getenv("HTTPACTION_PARAMS_PRECEDENCE", ParamsPrecedence.BODY_WINS.value)

        return cls(
            logger=logging.getLogger(logger_name) if logger_name else None,
            params_precedence=parse_precedence(precedence),
        )


def parse_precedence(value: Any) -> ParamsPrecedence:
    """
    Coerce a string or enum member into a ParamsPrecedence.

    Raises:
        ConfigError: For unknown values.
    """
    if isinstance(value, ParamsPrecedence):
        return value
    try:
        return ParamsPrecedence(str(value).strip().lower())
    except ValueError as e:
        choices = ", ".join(p.value for p in ParamsPrecedence)
        raise ConfigError(f"Invalid params precedence {value!r}. Must be one of: {choices}.") from e


def configure_logging(level: str = "INFO") -> None:
    """
    Configure stdlib logging for applications built on httpaction.

    Sets up the root handler (if none exists yet) and the level of the
    "httpaction" logger hierarchy.

    Raises:
        ConfigError: For an unknown level name.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"Invalid log level: {level!r}")

    logging.basicConfig(
        level=numeric,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("httpaction").setLevel(numeric)
