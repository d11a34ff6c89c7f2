"""
Tests for ReplayStream and MappedStream: replay, dedup, ordering, unsubscribe.
"""

from __future__ import annotations

from typing import Any, List

import pytest

from configstore.stream import ReplayStream


# ---------------------------------------------------------------------------
# ReplayStream Tests
# ---------------------------------------------------------------------------


class TestReplayStream:
    """Tests for the ReplayStream class."""

    def test_no_value_before_publish(self, received: List[Any]) -> None:
        """Test that subscribing to an empty stream delivers nothing."""
        stream: ReplayStream[str] = ReplayStream()
        stream.subscribe(received.append)

        assert received == []
        assert not stream.has_value
        assert stream.value is None

    def test_replay_latest_to_new_subscriber(self, received: List[Any]) -> None:
        """Test that a late subscriber immediately receives only the latest value."""
        stream: ReplayStream[str] = ReplayStream()
        stream.publish("a")
        stream.publish("b")

        stream.subscribe(received.append)

        assert received == ["b"]

    def test_order_and_dedup(self, received: List[Any]) -> None:
        """Test publish order is kept and consecutive duplicates are dropped."""
        stream: ReplayStream[str] = ReplayStream()
        stream.subscribe(received.append)

        results = [stream.publish(v) for v in ["a", "a", "b", "a", "a"]]

        assert received == ["a", "b", "a"]
        assert results == [True, False, True, True, False]

    def test_subscribers_see_same_sequence(self) -> None:
        """Test that all subscribers observe an identical sequence."""
        stream: ReplayStream[int] = ReplayStream()
        first: List[int] = []
        second: List[int] = []
        stream.subscribe(first.append)
        stream.publish(1)
        stream.subscribe(second.append)
        stream.publish(2)
        stream.publish(2)
        stream.publish(3)

        assert first == [1, 2, 3]
        assert second == [1, 2, 3]

    def test_unsubscribe(self, received: List[Any]) -> None:
        """Test that unsubscribed listeners stop receiving values."""
        stream: ReplayStream[str] = ReplayStream()
        subscription = stream.subscribe(received.append)
        stream.publish("a")
        subscription.unsubscribe()
        subscription.unsubscribe()
        stream.publish("b")

        assert received == ["a"]
        assert stream.subscriber_count == 0
        assert not subscription.active

    def test_subscription_context_manager(self, received: List[Any]) -> None:
        """Test that leaving the with-block unsubscribes."""
        stream: ReplayStream[str] = ReplayStream()
        with stream.subscribe(received.append):
            stream.publish("a")
        stream.publish("b")

        assert received == ["a"]

    def test_failing_subscriber_does_not_block_others(self, received: List[Any]) -> None:
        """Test that an exception in one listener does not stop delivery."""
        stream: ReplayStream[str] = ReplayStream()

        def broken(value: str) -> None:
            raise ValueError("boom")

        stream.subscribe(broken)
        stream.subscribe(received.append)

        assert stream.publish("a") is True
        assert received == ["a"]
        assert stream.value == "a"

    def test_publish_from_listener_keeps_order(self) -> None:
        """Test that a value published inside a listener reaches everyone after the current one."""
        stream: ReplayStream[int] = ReplayStream()
        first: List[int] = []
        second: List[int] = []

        def republish(value: int) -> None:
            first.append(value)
            if value == 1:
                stream.publish(2)

        stream.subscribe(republish)
        stream.subscribe(second.append)
        stream.publish(1)

        assert first == [1, 2]
        assert second == [1, 2]
        assert stream.value == 2

    def test_subscribe_from_listener_during_delivery(self) -> None:
        """Test that a subscriber added mid-delivery gets the queued latest value once."""
        stream: ReplayStream[int] = ReplayStream()
        late: List[int] = []

        def on_value(value: int) -> None:
            if value == 1:
                stream.publish(2)
                stream.subscribe(late.append)

        stream.subscribe(on_value)
        stream.publish(1)

        assert late == [2]

    def test_view_has_no_publish(self, received: List[Any]) -> None:
        """Test that a view forwards values but cannot publish."""
        stream: ReplayStream[str] = ReplayStream()
        view = stream.as_view()
        view.subscribe(received.append)
        stream.publish("a")

        assert not hasattr(view, "publish")
        assert view.has_value
        assert view.value == "a"
        assert received == ["a"]

    @pytest.mark.asyncio
    async def test_async_updates_buffers_unread_values(self) -> None:
        """Test that values published between reads are kept in order."""
        stream: ReplayStream[int] = ReplayStream()
        stream.publish(0)
        updates = stream.updates()
        assert await updates.__anext__() == 0

        for value in (1, 2, 3):
            stream.publish(value)

        assert [await updates.__anext__() for _ in range(3)] == [1, 2, 3]
        await updates.aclose()

    @pytest.mark.asyncio
    async def test_async_updates(self) -> None:
        """Test async iteration replays the latest value then follows publishes."""
        stream: ReplayStream[str] = ReplayStream()
        stream.publish("a")

        updates = stream.updates()
        assert await updates.__anext__() == "a"
        assert stream.subscriber_count == 1

        stream.publish("b")
        stream.publish("b")
        stream.publish("c")
        assert await updates.__anext__() == "b"
        assert await updates.__anext__() == "c"

        await updates.aclose()
        assert stream.subscriber_count == 0


# ---------------------------------------------------------------------------
# MappedStream Tests
# ---------------------------------------------------------------------------


class TestMappedStream:
    """Tests for streams derived with map()."""

    def test_projection_applied(self, received: List[Any]) -> None:
        """Test that values are projected and replayed through the view."""
        source: ReplayStream[str] = ReplayStream()
        lengths = source.map(len)

        assert not lengths.has_value
        assert lengths.value is None

        source.publish("abc")
        lengths.subscribe(received.append)
        source.publish("abcdef")

        assert received == [3, 6]
        assert lengths.value == 6

    def test_dedup_follows_source(self, received: List[Any]) -> None:
        """Test that the view does not re-deliver when the source dedups."""
        source: ReplayStream[str] = ReplayStream()
        source.map(str.upper).subscribe(received.append)
        source.publish("x")
        source.publish("x")

        assert received == ["X"]

    def test_unsubscribe_detaches_from_source(self, received: List[Any]) -> None:
        """Test that unsubscribing a mapped listener removes it from the source."""
        source: ReplayStream[str] = ReplayStream()
        subscription = source.map(str.upper).subscribe(received.append)
        assert source.subscriber_count == 1

        subscription.unsubscribe()

        assert source.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_async_updates(self) -> None:
        """Test async iteration over a mapped stream."""
        source: ReplayStream[str] = ReplayStream()
        updates = source.map(int).updates()
        source.publish("1")

        assert await updates.__anext__() == 1
        await updates.aclose()
