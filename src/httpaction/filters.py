"""
=============================================================================
FILTER REGISTRY
=============================================================================

Ordered before/after filter lists for an action class.

A filter is identified by the name of a method on the action. Filters
run in registration order; a name appears at most once per list.

=============================================================================
INHERITANCE BY COPY
=============================================================================

Every action class owns its own FilterChain. When a subclass is created
it receives a value copy of its parent's chain, so:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   class Base(Action)        before: [authenticate]                  │
    │          │                                                           │
    │          │ copy                                                      │
    │          ▼                                                           │
    │   class Public(Base)        before: []          skip authenticate   │
    │          │                                                           │
    │          │ copy                                                      │
    │          ▼                                                           │
    │   class Feed(Public)        before: [load_feed]                     │
    │                                                                      │
    │   Base still runs [authenticate]: skipping in Public touched only   │
    │   Public's copy.                                                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The chain is resolved once, at class creation; nothing walks the class
hierarchy while a request is being handled.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger(__name__)


@dataclass
class FilterChain:
    """Before and after filter names for one action class."""

    before: List[str] = field(default_factory=list)
    after: List[str] = field(default_factory=list)

    def copy(self) -> "FilterChain":
        """Value copy; mutating the copy never affects this chain."""
        return FilterChain(before=list(self.before), after=list(self.after))

    def add_before(self, name: str) -> "FilterChain":
        """Append a before filter unless it is already registered."""
        _add(self.before, name, "before")
        return self

    def add_after(self, name: str) -> "FilterChain":
        """Append an after filter unless it is already registered."""
        _add(self.after, name, "after")
        return self

    def skip_before(self, name: str) -> "FilterChain":
        """Remove a before filter; no-op if it isn't registered."""
        _remove(self.before, name, "before")
        return self

    def skip_after(self, name: str) -> "FilterChain":
        """Remove an after filter; no-op if it isn't registered."""
        _remove(self.after, name, "after")
        return self


def _add(filters: List[str], name: str, kind: str) -> None:
    if not isinstance(name, str):
        raise TypeError(f"{kind} filter must be a method name, got {name!r}")
    if name in filters:
        return
    filters.append(name)
    logger.debug(f"Added {kind} filter: {name}")


def _remove(filters: List[str], name: str, kind: str) -> None:
    if name in filters:
        filters.remove(name)
        logger.debug(f"Skipped {kind} filter: {name}")
