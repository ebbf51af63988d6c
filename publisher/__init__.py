"""
Publisher - Public API
========================
In-process publish/subscribe.
Publishers announce events. Listeners decide whether they care.
"""

from publisher.dispatcher import dispatch
from publisher.errors import (
    DispatchFailure,
    InvalidConfiguration,
    PublisherError,
    UnknownListenerType,
)
from publisher.listener import Listener, StructuredListener
from publisher.publisher import Publisher, instance, reset_instance
from publisher.queue import InMemoryJobQueue, JobQueue, ListenerJob, QueueBridge
from publisher.registry import SubscriptionEntry, SubscriptionRegistry
from publisher.types import ListenerTypeRegistry, default_types

__all__ = [
    "Publisher",
    "instance",
    "reset_instance",
    "dispatch",
    "SubscriptionEntry",
    "SubscriptionRegistry",
    "StructuredListener",
    "Listener",
    "ListenerTypeRegistry",
    "default_types",
    "ListenerJob",
    "JobQueue",
    "QueueBridge",
    "InMemoryJobQueue",
    "PublisherError",
    "InvalidConfiguration",
    "UnknownListenerType",
    "DispatchFailure",
]
