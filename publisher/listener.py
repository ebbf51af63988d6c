"""
Publisher - Listener Contract
===============================
Two ways an object can receive events:

1. Named-method listener (any object):
   publish("beforeSave", entity) calls obj.beforeSave(entity)
   if the object has such a method. Nothing else is required.

2. Structured listener:
   the object exposes dispatch(event, args) -> bool and does its own
   event-to-behaviour routing. Detected by capability, not inheritance.

Listener is a convenience base class for structured listeners that
routes each event to the method of the same name, wrapped in
startup()/shutdown() hooks.

Return value rule (both kinds): only a literal False stops propagation.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class StructuredListener(Protocol):
    """Capability: owns its dispatch and reports whether to continue."""

    def dispatch(self, event: str, args: Sequence[Any]) -> bool:
        ...  # pragma: no cover


# Names that are part of the Listener machinery, never event handlers.
RESERVED_NAMES = frozenset({"dispatch", "handles", "startup", "shutdown"})


class Listener:
    """
    Base class for structured listeners.

    Usage:
        class UserListener(Listener):
            def startup(self):
                self.mailer = Mailer()

            def afterCreate(self, user):
                self.mailer.welcome(user)

        publisher.subscribe(UserListener)

    A type (not an instance) can be subscribed with queue=True, in which
    case the job worker creates the instance later.
    """

    def startup(self) -> None:
        """Called before every routed event."""

    def shutdown(self) -> None:
        """Called after every routed event that did not raise."""

    def handles(self, event: str) -> bool:
        """Check if this listener has a handler method for event."""
        if not event or event.startswith("_") or event in RESERVED_NAMES:
            return False
        return callable(getattr(self, event, None))

    def dispatch(self, event: str, args: Sequence[Any] = ()) -> bool:
        """
        Route event to the method of the same name.

        Returns:
            False only if the handler returned False, True otherwise
            (including when there is no handler for the event).
        """
        self.startup()
        result = None
        if self.handles(event):
            result = getattr(self, event)(*args)
        self.shutdown()
        return result is not False
