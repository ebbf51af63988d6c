"""
Publisher - Settings
======================
Reads PUBLISHER_* values from Django settings.

Outside a configured Django project (scripts, plain library use,
early import) every value falls back to its default, so nothing here
requires django.setup() to have run.

Settings:
    PUBLISHER_LISTENERS        Subscribed to the global publisher at
                               startup. Each item is a target or a
                               (target, {"on": ..., "queue": ...}) pair.
    PUBLISHER_LISTENER_TYPES   {name: factory} for type descriptors.
    PUBLISHER_JOB_QUEUE        JobQueue used for queued listeners.
                               Default: one process-wide InMemoryJobQueue.
    PUBLISHER_QUEUE_MAX_SIZE   Bound of the default in-memory queue
                               (0 = unbounded).
"""

from __future__ import annotations

from threading import Lock
from typing import Any

from django.conf import settings

from publisher.queue import InMemoryJobQueue

DEFAULTS = {
    "PUBLISHER_LISTENERS": (),
    "PUBLISHER_LISTENER_TYPES": {},
    "PUBLISHER_JOB_QUEUE": None,
    "PUBLISHER_QUEUE_MAX_SIZE": 0,
}

_default_job_queue = None
_default_job_queue_lock = Lock()


def get_setting(name: str) -> Any:
    """Django setting if configured and present, else the default."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown publisher setting '{name}'.")
    if not settings.configured:
        return DEFAULTS[name]
    return getattr(settings, name, DEFAULTS[name])


def get_job_queue():
    """
    The job queue for publishers that were not given one.

    PUBLISHER_JOB_QUEUE wins when set. Otherwise a single
    InMemoryJobQueue is created on first use and shared.
    """
    configured = get_setting("PUBLISHER_JOB_QUEUE")
    if configured is not None:
        return configured

    global _default_job_queue
    if _default_job_queue is None:
        with _default_job_queue_lock:
            if _default_job_queue is None:
                _default_job_queue = InMemoryJobQueue(
                    max_size=get_setting("PUBLISHER_QUEUE_MAX_SIZE")
                )
    return _default_job_queue


def reset_default_job_queue() -> None:
    """Drop the shared in-memory queue (tests)."""
    global _default_job_queue
    with _default_job_queue_lock:
        _default_job_queue = None
