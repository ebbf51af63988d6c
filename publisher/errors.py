"""
Publisher - Errors
====================
Error types for subscription and dispatch.

Listener exceptions are NOT wrapped in any of these. Whatever a
listener raises reaches the caller of publish() unchanged.
"""

from typing import Any


class PublisherError(Exception):
    """Base error for Publisher operations."""
    pass


class InvalidConfiguration(PublisherError):
    """Subscription (or hand-off) configured in a way that cannot work."""

    def __init__(self, target: Any, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(
            f"Invalid subscription for {_describe(target)}: {reason}"
        )


class UnknownListenerType(InvalidConfiguration):
    """Type descriptor has no registered factory."""

    def __init__(self, descriptor: Any):
        self.descriptor = descriptor
        super().__init__(
            descriptor,
            f"no listener type registered under '{descriptor}'.",
        )


class DispatchFailure(PublisherError):
    """A queued listener could not be handed to the job queue."""

    def __init__(self, event: str, target: Any, detail: str = ""):
        self.event = event
        self.target = target
        self.detail = detail
        message = (
            f"Error dispatching ListenerJob for {_describe(target)} "
            f"(event: '{event}')"
        )
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


def _describe(target: Any) -> str:
    if isinstance(target, type):
        return target.__qualname__
    if isinstance(target, str):
        return f"'{target}'"
    return type(target).__qualname__ + " instance"
