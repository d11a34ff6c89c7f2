"""
Change Notification Streams.

ReplayStream keeps the most recently published value and hands it to every
new subscriber immediately, then forwards each later value in publish order.
Publishing a value equal to the current one is a no-op, so subscribers never
see the same value twice in a row.

StreamView is a read-only view over another stream. MappedStream is a view
with a projection applied to each delivered value.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections import deque
from typing import AsyncIterator, Callable, Deque, Generic, List, Optional, TypeVar

from loguru import logger


T = TypeVar("T")
U = TypeVar("U")

Listener = Callable[[T], None]


class Subscription(Generic[T]):
    """
    Handle for a registered listener. Call unsubscribe() to stop deliveries.

    Can be used as a context manager to unsubscribe on exit.
    """

    def __init__(self, stream: ReplayStream[T], listener: Listener[T]) -> None:
        self._stream = stream
        self.listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        """Stop receiving values. Safe to call more than once."""
        if self.active:
            self.active = False
            self._stream._detach(self)

    def __enter__(self) -> Subscription[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class Stream(ABC, Generic[T]):
    """Common surface of replaying streams."""

    @property
    @abstractmethod
    def has_value(self) -> bool:
        """True once a value has been published."""

    @property
    @abstractmethod
    def value(self) -> Optional[T]:
        """The latest value, or None before the first publish."""

    @abstractmethod
    def subscribe(self, listener: Listener[T]) -> Subscription:
        """Register a listener; the latest value (if any) is delivered at once."""

    async def updates(self) -> AsyncIterator[T]:
        """
        Iterate over the latest value and every value published afterwards.

        The iteration never ends on its own; break out of the loop (or close
        the generator) to unsubscribe. Values published while the consumer is
        not iterating are buffered without limit, so a started iterator that
        is no longer read must be closed.
        """
        queue: asyncio.Queue[T] = asyncio.Queue()
        subscription = self.subscribe(queue.put_nowait)
        try:
            while True:
                yield await queue.get()
        finally:
            subscription.unsubscribe()

    def map(self, projection: Callable[[T], U]) -> MappedStream[U]:
        """Return a view of this stream with ``projection`` applied to every value."""
        return MappedStream(self, projection)


class ReplayStream(Stream[T]):
    """
    Broadcast stream holding at most one buffered value.

    A value published from inside a listener is queued and delivered once
    the current delivery has reached every subscriber, so all subscribers
    observe the same sequence.

    Attributes:
        name: Label used in log messages.
    """

    def __init__(self, name: str = "stream") -> None:
        self.name = name
        self._value: Optional[T] = None
        self._has_value = False
        self._subscriptions: List[Subscription[T]] = []
        self._pending: Deque[T] = deque()
        self._delivering = False

    @property
    def has_value(self) -> bool:
        return self._has_value

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def subscriber_count(self) -> int:
        """Number of active subscriptions."""
        return len(self._subscriptions)

    def as_view(self) -> StreamView[T]:
        """Return a subscribe-only view of this stream, without publish()."""
        return StreamView(self)

    def publish(self, value: T) -> bool:
        """
        Publish a value to all subscribers.

        Returns:
            False if the value equals the current one and was dropped,
            True if it was accepted for delivery.
        """
        if self._has_value and value == self._value:
            logger.debug(f"[{self.name}] Value unchanged, not re-published")
            return False

        self._value = value
        self._has_value = True
        self._pending.append(value)
        if self._delivering:
            return True

        self._delivering = True
        try:
            while self._pending:
                current = self._pending.popleft()
                for subscription in list(self._subscriptions):
                    if subscription.active:
                        self._deliver(subscription, current)
        finally:
            self._delivering = False
        return True

    def subscribe(self, listener: Listener[T]) -> Subscription[T]:
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        logger.debug(f"[{self.name}] Subscriber added ({len(self._subscriptions)} active)")
        # A queued latest value reaches the new subscriber through the drain loop.
        if self._has_value and not self._pending:
            self._deliver(subscription, self._value)  # type: ignore[arg-type]
        return subscription

    def _detach(self, subscription: Subscription[T]) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            logger.debug(f"[{self.name}] Subscriber removed ({len(self._subscriptions)} active)")

    def _deliver(self, subscription: Subscription[T], value: T) -> None:
        try:
            subscription.listener(value)
        except Exception as e:
            logger.error(f"[{self.name}] Subscriber {subscription.listener!r} raised: {e}")


class StreamView(Stream[T]):
    """Read-only view over another stream: subscribe and inspect, never publish."""

    def __init__(self, source: Stream[T]) -> None:
        self._source = source

    @property
    def has_value(self) -> bool:
        return self._source.has_value

    @property
    def value(self) -> Optional[T]:
        return self._source.value

    def subscribe(self, listener: Listener[T]) -> Subscription:
        return self._source.subscribe(listener)


class MappedStream(StreamView[U]):
    """
    Derived stream applying a projection to each value of a source stream.

    The projection runs once per delivery, so each subscriber gets its own
    projected value.
    """

    def __init__(self, source: Stream[T], projection: Callable[[T], U]) -> None:
        super().__init__(source)  # type: ignore[arg-type]
        self._projection = projection

    @property
    def value(self) -> Optional[U]:
        if not self._source.has_value:
            return None
        return self._projection(self._source.value)  # type: ignore[arg-type]

    def subscribe(self, listener: Listener[U]) -> Subscription:
        projection = self._projection
        return self._source.subscribe(lambda value: listener(projection(value)))
