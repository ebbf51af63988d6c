"""
Publisher - Listener Types
============================
Explicit factory lookup for type descriptors.

A subscription can name its listener by type instead of passing an
object. The listener is then built fresh for every event (inline) or
by the job worker (queued). Descriptors resolve as follows:

- a class resolves to itself and is called with no arguments
- a string resolves to the factory registered under that name

No string-based imports: a name only works once it has been
registered.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Callable, Union

from publisher.errors import InvalidConfiguration, UnknownListenerType

logger = logging.getLogger("publisher")

ListenerFactory = Callable[[], Any]
TypeDescriptor = Union[type, str]


class ListenerTypeRegistry:
    """
    Name → factory registry for listener types.

    Usage:
        types = ListenerTypeRegistry()
        types.register("ReportListener", ReportListener)

        types.instantiate("ReportListener")  # new ReportListener()
        types.instantiate(ReportListener)    # same, by class
    """

    def __init__(self):
        self._factories: dict[str, ListenerFactory] = {}
        self._lock = Lock()

    def register(self, name: Union[str, type], factory: ListenerFactory = None) -> None:
        """
        Register a factory under a name.

        register(ReportListener) registers the class under its own
        __name__.

        Raises:
            InvalidConfiguration: Bad name, non-callable factory, or
                                  name already taken by another factory.
        """
        if isinstance(name, type) and factory is None:
            name, factory = name.__name__, name

        if not isinstance(name, str) or not name:
            raise InvalidConfiguration(name, "listener type name must be a non-empty string.")
        if not callable(factory):
            raise InvalidConfiguration(
                name, f"listener factory must be callable, got {type(factory).__name__}."
            )

        with self._lock:
            existing = self._factories.get(name)
            if existing is not None and existing is not factory:
                raise InvalidConfiguration(
                    name, f"listener type '{name}' is already registered."
                )
            self._factories[name] = factory

        logger.info(f"Listener type registered: '{name}'")

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return name in self._factories

    def resolve(self, descriptor: TypeDescriptor) -> ListenerFactory:
        """
        Return the factory for a descriptor.

        Raises:
            UnknownListenerType: String name with no registered factory,
                                 or a descriptor that is neither class
                                 nor string.
        """
        if isinstance(descriptor, type):
            return descriptor
        if isinstance(descriptor, str):
            with self._lock:
                factory = self._factories.get(descriptor)
            if factory is not None:
                return factory
        raise UnknownListenerType(descriptor)

    def instantiate(self, descriptor: TypeDescriptor) -> Any:
        """Build a fresh listener instance. Nothing is cached."""
        return self.resolve(descriptor)()

    def names(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._factories.keys())

    def clear(self) -> None:
        with self._lock:
            self._factories.clear()


# Process-wide registry used when none is injected.
default_types = ListenerTypeRegistry()
