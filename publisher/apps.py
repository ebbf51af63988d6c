"""
Publisher - App Configuration
===============================
Wires settings into the process-wide publisher when Django finishes
loading.

Rules:
- Runs once via ready()
- Listener types are registered before listeners are subscribed,
  so a configured listener may name a configured type
- A bad entry raises InvalidConfiguration and prevents startup
"""

import logging
from typing import Any

from django.apps import AppConfig

from publisher import conf
from publisher.errors import InvalidConfiguration

logger = logging.getLogger("publisher")


def register_configured_types(types) -> int:
    """Register PUBLISHER_LISTENER_TYPES. Returns the count."""
    configured = conf.get_setting("PUBLISHER_LISTENER_TYPES")
    for name, factory in configured.items():
        types.register(name, factory)
    return len(configured)


def subscribe_configured_listeners(publisher) -> int:
    """Subscribe PUBLISHER_LISTENERS to publisher. Returns the count."""
    count = 0
    for item in conf.get_setting("PUBLISHER_LISTENERS"):
        target, options = _split_listener_setting(item)
        publisher.subscribe(target, **options)
        count += 1
    return count


def _split_listener_setting(item: Any) -> tuple[Any, dict]:
    if not isinstance(item, tuple):
        return item, {}

    if len(item) != 2 or not isinstance(item[1], dict):
        raise InvalidConfiguration(
            item, "PUBLISHER_LISTENERS items must be a target or (target, options)."
        )

    target, options = item
    unknown = set(options) - {"on", "queue"}
    if unknown:
        raise InvalidConfiguration(
            target, f"unknown subscribe option(s): {', '.join(sorted(unknown))}."
        )
    return target, dict(options)


class PublisherConfig(AppConfig):
    name = "publisher"
    label = "publisher"
    verbose_name = "Publisher"

    def ready(self):
        from publisher.publisher import instance
        from publisher.types import default_types

        types = register_configured_types(default_types)
        listeners = subscribe_configured_listeners(instance())

        logger.info(
            f"Publisher configured: {types} listener type(s), "
            f"{listeners} global listener(s)"
        )
