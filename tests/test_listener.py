"""
Tests for publisher.listener - Listener base class and hooks.
"""

from publisher.listener import Listener, StructuredListener


class OrderListener(Listener):

    def __init__(self):
        self.trace = []

    def startup(self):
        self.trace.append("startup")

    def shutdown(self):
        self.trace.append("shutdown")

    def afterPlace(self, order_id, total):
        self.trace.append(("afterPlace", order_id, total))

    def beforeCancel(self, order_id):
        self.trace.append(("beforeCancel", order_id))
        return False

    def _internal(self):
        self.trace.append("_internal")


class TestListener:

    def test_is_structured_listener(self):
        assert isinstance(OrderListener(), StructuredListener)

    def test_hooks_wrap_handler(self):
        listener = OrderListener()
        assert listener.dispatch("afterPlace", [7, 100]) is True
        assert listener.trace == ["startup", ("afterPlace", 7, 100), "shutdown"]

    def test_false_from_handler(self):
        listener = OrderListener()
        assert listener.dispatch("beforeCancel", [7]) is False
        assert listener.trace == ["startup", ("beforeCancel", 7), "shutdown"]

    def test_unknown_event_runs_hooks_only(self):
        listener = OrderListener()
        assert listener.dispatch("afterShip") is True
        assert listener.trace == ["startup", "shutdown"]

    def test_private_and_reserved_names_not_routed(self):
        listener = OrderListener()
        assert not listener.handles("_internal")
        assert not listener.handles("startup")
        assert not listener.handles("dispatch")
        assert not listener.handles("handles")
        assert listener.dispatch("handles", ["afterPlace"]) is True
        listener.dispatch("_internal")
        assert "_internal" not in listener.trace

    def test_handles(self):
        assert OrderListener().handles("afterPlace")
        assert not OrderListener().handles("afterShip")
