"""
Publisher - Publish
=====================
Broadcasts an event to every interested listener.

Publish behavior:
1. Collect global listeners (process-wide publisher), then local ones
2. Skip entries whose event filter excludes the event
3. Queued entries → hand off to the job queue (never run inline)
4. Type entries → build a fresh instance
5. Dispatch in order; a subscribed Publisher passes the event on to
   its own listeners
6. Stop at the first listener that returns False

Failure behavior:
- Listener exceptions propagate immediately; later listeners are
  not notified
- A refused or failed hand-off raises DispatchFailure immediately;
  later listeners are not notified
- Nothing is retried here

Usage:
    class User:
        def __init__(self):
            self.publisher = Publisher()
            self.publisher.subscribe(self, on=["beforeSave"])

        def save(self):
            self.publisher.publish("beforeSave", self)

    # Global listener, notified for every Publisher in the process
    instance().subscribe(AuditLog())
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Callable, Optional, Sequence

from publisher import conf
from publisher.dispatcher import dispatch as dispatch_to
from publisher.errors import DispatchFailure
from publisher.queue import JobQueue, QueueBridge
from publisher.registry import EventFilter, SubscriptionEntry, SubscriptionRegistry
from publisher.types import ListenerTypeRegistry, default_types

logger = logging.getLogger("publisher")


class Publisher:
    """
    Caller-owned subscription registry plus publish/dispatch.

    Args:
        job_queue:        Queue for queued listeners. Default: from settings
                          (see publisher.conf).
        types:            Factories for type descriptors. Default:
                          publisher.types.default_types.
        global_publisher: Zero-argument callable returning the process-wide
                          publisher whose listeners run first, or None for
                          no global listeners. Default:
                          publisher.publisher.instance.
    """

    def __init__(
        self,
        job_queue: Optional[JobQueue] = None,
        types: Optional[ListenerTypeRegistry] = None,
        global_publisher: Optional[Callable[[], "Publisher"]] = None,
    ):
        self._registry = SubscriptionRegistry()
        self._job_queue = job_queue
        self._types = types
        self._global_publisher = global_publisher

    # ══════════════════════════════════════════════════════════
    # REGISTRY
    # ══════════════════════════════════════════════════════════

    def subscribe(self, target: Any, on: EventFilter = None, queue: bool = False) -> bool:
        """
        Subscribe a listener to this publisher.

            publisher.subscribe(self)
            publisher.subscribe(self, on=["beforeSave", "afterSave"])
            publisher.subscribe(ReportListener, queue=True)

        Raises:
            InvalidConfiguration: queue=True with a live object.
        """
        return self._registry.subscribe(target, on=on, queue=queue)

    def listeners(self) -> tuple[SubscriptionEntry, ...]:
        """This publisher's own subscriptions, in order."""
        return self._registry.listeners()

    def clear(self) -> None:
        """Remove all of this publisher's subscriptions."""
        self._registry.clear()

    @property
    def registry(self) -> SubscriptionRegistry:
        return self._registry

    @property
    def types(self) -> ListenerTypeRegistry:
        return self._types if self._types is not None else default_types

    @property
    def job_queue(self) -> JobQueue:
        if self._job_queue is not None:
            return self._job_queue
        return conf.get_job_queue()

    # ══════════════════════════════════════════════════════════
    # PUBLISH
    # ══════════════════════════════════════════════════════════

    def effective_listeners(self) -> list[SubscriptionEntry]:
        """Global entries first, then local. The global publisher itself
        contributes its entries once."""
        global_publisher = (self._global_publisher or instance)()
        entries: list[SubscriptionEntry] = []
        if global_publisher is not None and global_publisher is not self:
            entries.extend(global_publisher.listeners())
        entries.extend(self.listeners())
        return entries

    def publish(self, event: str, *args: Any) -> None:
        """
        Broadcast an event to all subscribers with any arguments.

            publisher.publish("beforeSave", entity, save_options)
            publisher.publish("startup")

        Raises:
            DispatchFailure: A queued listener could not be enqueued.
            Any exception raised by a listener.
        """
        if not isinstance(event, str) or not event:
            raise ValueError(f"Event name must be a non-empty string, got {event!r}.")

        self._deliver(self.effective_listeners(), event, args)

    def _deliver(self, entries: Sequence[SubscriptionEntry], event: str, args: tuple) -> bool:
        """Run entries in order. Returns False if a listener halted propagation."""
        notified = 0
        queued = 0

        for entry in entries:
            if not entry.wants(event):
                continue

            if entry.queued:
                self._hand_off(entry, event, args)
                queued += 1
                continue

            target = entry.target
            if entry.is_type_descriptor:
                target = self.types.instantiate(target)

            notified += 1
            if isinstance(target, Publisher):
                # Forwarded to the subscribed publisher's own listeners only;
                # global listeners have already run.
                delivered = target._deliver(target.listeners(), event, args)
            else:
                delivered = self.dispatch(target, event, args)

            if delivered is False:
                logger.debug(
                    f"Propagation of '{event}' halted by "
                    f"{type(target).__qualname__} "
                    f"({notified} notified, {queued} queued)"
                )
                return False

        logger.debug(
            f"Published '{event}': {notified} notified, {queued} queued"
        )
        return True

    def _hand_off(self, entry: SubscriptionEntry, event: str, args: tuple) -> None:
        bridge = QueueBridge(self.job_queue)
        try:
            accepted = bridge.hand_off(entry.target, event, args)
        except Exception as exc:
            logger.error(
                f"Hand-off of '{event}' to the job queue raised: {exc}"
            )
            raise DispatchFailure(event, entry.target, str(exc)) from exc

        if not accepted:
            logger.error(f"Hand-off of '{event}' refused by the job queue")
            raise DispatchFailure(event, entry.target, "job queue refused the job.")

    # ══════════════════════════════════════════════════════════
    # DISPATCH
    # ══════════════════════════════════════════════════════════

    def dispatch(self, target: Any, event: str, args: Sequence[Any] = ()) -> bool:
        """Deliver one event to one listener. See publisher.dispatcher.dispatch."""
        return dispatch_to(target, event, args)

    @classmethod
    def instance(cls) -> "Publisher":
        """The process-wide publisher."""
        return instance()


# ══════════════════════════════════════════════════════════════
# PROCESS-WIDE PUBLISHER
# ══════════════════════════════════════════════════════════════

_instance: Optional[Publisher] = None
_instance_lock = Lock()


def instance() -> Publisher:
    """
    Return the process-wide publisher, creating it on first call.

    Its listeners are notified before the local listeners of every
    other Publisher. Safe to call before any setup.
    """
    global _instance
    if _instance is None:
        with _instance_lock:
            if _instance is None:
                _instance = Publisher()
                logger.debug("Global publisher created")
    return _instance


def reset_instance() -> None:
    """Discard the process-wide publisher. The next instance() creates a new one."""
    global _instance
    with _instance_lock:
        _instance = None
