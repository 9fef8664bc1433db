# SPDX-License-Identifier: MIT
"""Tests for ccresolve.core.events."""

from __future__ import annotations

from ccresolve.core.events import CommandChanged


class TestCommandChanged:
    def test_broadcast_reaches_listener(self):
        event = CommandChanged()
        received: list[list[str]] = []
        event.subscribe(received.append)

        event.broadcast(["/src/a.cpp", "/src/b.cpp"])

        assert received == [["/src/a.cpp", "/src/b.cpp"]]

    def test_registration_order(self):
        event = CommandChanged()
        order: list[str] = []
        event.subscribe(lambda paths: order.append("first"))
        event.subscribe(lambda paths: order.append("second"))
        event.subscribe(lambda paths: order.append("third"))

        event.broadcast(["/x.cpp"])

        assert order == ["first", "second", "third"]

    def test_listener_mutation_not_seen_by_others(self):
        event = CommandChanged()
        seen: list[str] = []
        event.subscribe(lambda paths: paths.clear())
        event.subscribe(seen.extend)
        paths = ["/a.cpp"]

        event.broadcast(paths)

        assert seen == ["/a.cpp"]
        assert paths == ["/a.cpp"]

    def test_broadcast_without_listeners(self):
        CommandChanged().broadcast(["/x.cpp"])

    def test_unsubscribe(self):
        event = CommandChanged()
        received: list[list[str]] = []
        sub = event.subscribe(received.append)

        sub.unsubscribe()
        event.broadcast(["/x.cpp"])

        assert received == []
        assert not sub.active
        assert len(event) == 0

    def test_unsubscribe_twice_is_harmless(self):
        event = CommandChanged()
        sub = event.subscribe(lambda paths: None)
        sub.unsubscribe()
        sub.unsubscribe()
        assert len(event) == 0

    def test_context_manager(self):
        event = CommandChanged()
        received: list[list[str]] = []
        with event.subscribe(received.append):
            event.broadcast(["/in.cpp"])
        event.broadcast(["/out.cpp"])

        assert received == [["/in.cpp"]]

    def test_listener_can_unsubscribe_during_broadcast(self):
        event = CommandChanged()
        calls: list[str] = []
        subs = []

        def once(paths: list[str]) -> None:
            calls.append("once")
            subs[0].unsubscribe()

        subs.append(event.subscribe(once))
        event.subscribe(lambda paths: calls.append("always"))

        event.broadcast(["/a.cpp"])
        event.broadcast(["/b.cpp"])

        assert calls == ["once", "always", "always"]

