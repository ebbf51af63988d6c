"""
Shared fixtures: every test starts with an empty global publisher,
an empty default type registry and a fresh default job queue.
"""

import pytest

from publisher import conf
from publisher.publisher import reset_instance
from publisher.types import default_types


@pytest.fixture(autouse=True)
def clean_publisher_state():
    reset_instance()
    default_types.clear()
    conf.reset_default_job_queue()
    yield
    reset_instance()
    default_types.clear()
    conf.reset_default_job_queue()


class Recorder:
    """Plain listener that records every call into a shared log."""

    def __init__(self, name, log, results=None):
        self.name = name
        self.log = log
        self.results = results or {}

    def _record(self, event, args):
        self.log.append((self.name, event, args))
        return self.results.get(event)

    def beforeSave(self, *args):
        return self._record("beforeSave", args)

    def afterSave(self, *args):
        return self._record("afterSave", args)

    def startup(self, *args):
        return self._record("startup", args)


@pytest.fixture
def call_log():
    return []


@pytest.fixture
def make_recorder(call_log):
    def _make(name, **results):
        return Recorder(name, call_log, results)
    return _make
