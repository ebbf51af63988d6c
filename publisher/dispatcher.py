"""
Publisher - Dispatcher
========================
Delivers one event to one listener.

Dispatch behavior:
1. Structured listener (has dispatch(event, args)) → delegate
2. Any other object → call the method named after the event, if any
3. Report False only when the listener said False

Names starting with an underscore are never looked up on plain
objects.

This module does NOT:
- Catch listener exceptions
- Look at registries or filters
- Queue anything

It is the single adaptation point between "any object with a
same-named method" and the structured Listener contract.
"""

import inspect
import logging
from typing import Any, Sequence

from publisher.listener import StructuredListener

logger = logging.getLogger("publisher")

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def _takes_event_and_args(method: Any) -> bool:
    """True if method is shaped like dispatch(event, args)."""
    try:
        signature = inspect.signature(method)
    except (TypeError, ValueError):
        return True

    positional = [p for p in signature.parameters.values() if p.kind in _POSITIONAL]
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in signature.parameters.values()):
        return len(positional) <= 2
    return len(positional) == 2


def is_structured_listener(target: Any) -> bool:
    """
    Capability check. Classes themselves never qualify, and neither does
    an object whose dispatch takes something other than (event, args).
    """
    if isinstance(target, type) or not isinstance(target, StructuredListener):
        return False
    return _takes_event_and_args(target.dispatch)


def dispatch(target: Any, event: str, args: Sequence[Any] = ()) -> bool:
    """
    Dispatch an event to a single listener.

    Args:
        target: Listener instance (structured or plain object).
        event:  Event name, also the method name on plain objects.
        args:   Positional arguments for the handler.

    Returns:
        False if the listener asked to stop propagation,
        True otherwise (including when it has no handler).

    Listener exceptions propagate to the caller.
    """
    if is_structured_listener(target):
        return target.dispatch(event, list(args)) is not False

    if not event or event.startswith("_"):
        return True

    handler = getattr(target, event, None)
    if handler is None or not callable(handler):
        return True

    if handler(*args) is False:
        logger.debug(
            f"{type(target).__qualname__}.{event} returned False"
        )
        return False

    return True
