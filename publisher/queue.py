"""
Publisher - Queued Listeners
==============================
Hands queued subscriptions to a job queue instead of running them
inline.

The job carries the listener's TYPE descriptor, the event name and
the arguments. Whoever executes the job builds a fresh listener from
the type and dispatches the event to it. The publisher only learns
whether the job was accepted, never how it ran.

Also provides InMemoryJobQueue, a FIFO reference executor for
single-process deployments and tests:

    jobs = InMemoryJobQueue()
    publisher = Publisher(job_queue=jobs)
    publisher.subscribe("ReportListener", queue=True)
    publisher.publish("startup")    # enqueued, not run
    jobs.run_pending()              # runs ReportListener().startup()
"""

from __future__ import annotations

import logging
import queue
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from publisher.dispatcher import dispatch
from publisher.errors import InvalidConfiguration
from publisher.registry import is_type_descriptor
from publisher.types import ListenerTypeRegistry, TypeDescriptor, default_types

logger = logging.getLogger("publisher.queue")


# ══════════════════════════════════════════════════════════════
# LISTENER JOB
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ListenerJob:
    """A deferred delivery of one event to one listener type."""

    target: TypeDescriptor
    event: str
    args: tuple = ()
    job_id: uuid.UUID = field(default_factory=uuid.uuid4)
    enqueued_at: datetime = field(
        default_factory=lambda: datetime.now(tz=timezone.utc)
    )

    def __post_init__(self) -> None:
        if not is_type_descriptor(self.target):
            raise InvalidConfiguration(
                self.target, "a queued listener must be a class or type name."
            )

    @property
    def target_name(self) -> str:
        if isinstance(self.target, type):
            return self.target.__qualname__
        return self.target

    def execute(self, types: Optional[ListenerTypeRegistry] = None) -> bool:
        """Build the listener and deliver the event. Returns dispatch()'s result."""
        listener = (types if types is not None else default_types).instantiate(self.target)
        return dispatch(listener, self.event, self.args)


# ══════════════════════════════════════════════════════════════
# JOB QUEUE PROTOCOL
# ══════════════════════════════════════════════════════════════

class JobQueue(Protocol):
    """
    Anything that can accept a ListenerJob.

    enqueue() returns a truthy value (True, a job id, a handle) when the
    job was accepted and a falsy one when it was refused. It says nothing
    about whether or when the job runs.
    """

    def enqueue(self, job: ListenerJob) -> Any:
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# QUEUE BRIDGE
# ══════════════════════════════════════════════════════════════

class QueueBridge:
    """Translates a queued subscription match into a job."""

    def __init__(self, job_queue: JobQueue):
        self._job_queue = job_queue

    @property
    def job_queue(self) -> JobQueue:
        return self._job_queue

    def hand_off(self, target: TypeDescriptor, event: str, args: tuple = ()) -> bool:
        """
        Enqueue a job for target/event/args.

        Returns:
            True if the job queue accepted the job.

        Raises:
            InvalidConfiguration: target is a live object.
            Whatever the job queue raises while enqueueing.
        """
        job = ListenerJob(target=target, event=event, args=tuple(args))
        accepted = bool(self._job_queue.enqueue(job))

        if accepted:
            logger.debug(
                f"Queued {event} → {job.target_name} (job_id: {job.job_id})"
            )
        else:
            logger.warning(
                f"Job queue refused {event} → {job.target_name} "
                f"(job_id: {job.job_id})"
            )
        return accepted


# ══════════════════════════════════════════════════════════════
# IN-MEMORY JOB QUEUE
# ══════════════════════════════════════════════════════════════

class InMemoryJobQueue:
    """
    FIFO job queue held in process memory.

    Jobs run only when run_pending() is called. A bounded queue
    (max_size > 0) refuses jobs once full.
    """

    def __init__(self, max_size: int = 0, types: Optional[ListenerTypeRegistry] = None):
        if max_size < 0:
            raise ValueError("max_size must be >= 0")
        self._queue: queue.Queue[ListenerJob] = queue.Queue(maxsize=max_size)
        self._types = types

    def enqueue(self, job: ListenerJob) -> bool:
        try:
            self._queue.put_nowait(job)
        except queue.Full:
            return False
        return True

    def pending(self) -> int:
        """Number of jobs waiting to run."""
        return self._queue.qsize()

    def run_pending(self, max_jobs: Optional[int] = None) -> dict:
        """
        Drain the queue and execute each job in order.

        Args:
            max_jobs: Stop after this many jobs. None means run until
                      the queue is empty.

        Returns:
            dict with run results:
            {
                'jobs_run': int,
                'jobs_failed': int,
                'failures': list[dict]
            }

        A failing job is logged and reported, then the next job runs.
        """
        result = {
            "jobs_run": 0,
            "jobs_failed": 0,
            "failures": [],
        }

        while max_jobs is None or result["jobs_run"] + result["jobs_failed"] < max_jobs:
            try:
                job = self._queue.get_nowait()
            except queue.Empty:
                break

            try:
                job.execute(self._types)
                result["jobs_run"] += 1
            except Exception as exc:
                result["jobs_failed"] += 1
                result["failures"].append({
                    "job_id": str(job.job_id),
                    "target": job.target_name,
                    "event": job.event,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                })
                logger.error(
                    f"Listener job failed: {job.target_name}.{job.event} "
                    f"(job_id: {job.job_id}): {exc}",
                    exc_info=True,
                )
                # Continue to next job
            finally:
                self._queue.task_done()

        if result["jobs_run"] or result["jobs_failed"]:
            logger.info(
                f"Job run complete: {result['jobs_run']} run, "
                f"{result['jobs_failed']} failed, {self.pending()} pending"
            )

        return result
