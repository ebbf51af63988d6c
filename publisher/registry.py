"""
Publisher - Subscription Registry
===================================
Ordered record of who listens.

Rules:
- Insertion order is notification order
- A subscription may be limited to a set of event names (on=...)
- A queued subscription must name a type, never a live object:
  the job worker rebuilds the listener from its type later
- No single-entry unsubscribe; clear() resets the whole registry
- In-memory only (no DB, no files)
- Thread-safe
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Any, Iterable, Iterator, Optional, Union

from publisher.errors import InvalidConfiguration

logger = logging.getLogger("publisher")

EventFilter = Union[str, Iterable[str], None]


def is_type_descriptor(target: Any) -> bool:
    """A class, or the registered name of a listener type."""
    return isinstance(target, (type, str))


def normalize_filter(on: EventFilter) -> Optional[frozenset[str]]:
    """
    Turn the on= option into a frozenset of event names.

    None and empty collections both mean "all events" and
    normalize to None.
    """
    if on is None:
        return None
    if isinstance(on, str):
        names = frozenset({on})
    else:
        try:
            names = frozenset(on)
        except TypeError as exc:
            raise InvalidConfiguration(
                on, "on= must be an event name or a collection of event names."
            ) from exc
    for name in names:
        if not isinstance(name, str) or not name:
            raise InvalidConfiguration(
                on, f"event names must be non-empty strings, got {name!r}."
            )
    return names or None


@dataclass(frozen=True)
class SubscriptionEntry:
    """
    One subscription.

    Attributes:
        target:       Live object, class, or registered type name.
        event_filter: Event names this entry wants. None = all events.
        queued:       Hand matching events to the job queue instead
                      of invoking the listener inline.
    """

    target: Any
    event_filter: Optional[frozenset[str]] = None
    queued: bool = False

    @property
    def is_type_descriptor(self) -> bool:
        return is_type_descriptor(self.target)

    def wants(self, event: str) -> bool:
        """Check the event filter. No filter matches every event."""
        if not self.event_filter:
            return True
        return event in self.event_filter


class SubscriptionRegistry:
    """
    In-memory, ordered registry of subscriptions.

    Usage:
        registry = SubscriptionRegistry()
        registry.subscribe(audit_log)
        registry.subscribe(mailer, on=["afterCreate", "afterDelete"])
        registry.subscribe(ReportListener, queue=True)

        registry.listeners()  # (entry, entry, entry)
    """

    def __init__(self):
        self._entries: list[SubscriptionEntry] = []
        self._lock = Lock()

    def subscribe(
        self,
        target: Any,
        on: EventFilter = None,
        queue: bool = False,
    ) -> bool:
        """
        Append a subscription.

        Args:
            target: Object to call, or a type descriptor (class or
                    registered type name) to instantiate per event.
            on:     Event name or names to listen to. Default: all.
            queue:  Run the listener through the job queue.

        Returns:
            True once the entry is added.

        Raises:
            InvalidConfiguration: queue=True with a live object,
                                  no target, or a malformed filter.
                                  Nothing is added.
        """
        if target is None:
            raise InvalidConfiguration(target, "a listener target is required.")

        if queue and not is_type_descriptor(target):
            raise InvalidConfiguration(
                target,
                "subscribe using queue requires a class or type name, "
                "not an object.",
            )

        entry = SubscriptionEntry(
            target=target,
            event_filter=normalize_filter(on),
            queued=bool(queue),
        )

        with self._lock:
            self._entries.append(entry)
            position = len(self._entries)

        logger.info(
            f"Listener subscribed: {_target_name(target)} "
            f"(position: {position}, "
            f"on: {sorted(entry.event_filter) if entry.event_filter else 'all'}, "
            f"queued: {entry.queued})"
        )
        return True

    def listeners(self) -> tuple[SubscriptionEntry, ...]:
        """Snapshot of all entries, in subscription order."""
        with self._lock:
            return tuple(self._entries)

    def clear(self) -> None:
        """Remove every entry. Safe to call on an empty registry."""
        with self._lock:
            removed = len(self._entries)
            self._entries = []

        if removed:
            logger.info(f"Registry cleared: {removed} listener(s) removed")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[SubscriptionEntry]:
        return iter(self.listeners())


def _target_name(target: Any) -> str:
    if isinstance(target, str):
        return target
    if isinstance(target, type):
        return target.__qualname__
    return f"{type(target).__qualname__} instance"
