"""Fan-out channel for MarketEvents."""

from __future__ import annotations

import asyncio
import logging

from .models import MarketEvent

logger = logging.getLogger(__name__)

_CLOSED = object()


class EventStream:
    """One consumer's view of the event channel, as an async iterator.

        async for event in service.events():
            ...

    Iteration ends when the stream or its hub is closed.
    """

    def __init__(self, hub: EventHub, maxsize: int) -> None:
        self._hub = hub
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    def __aiter__(self) -> EventStream:
        return self

    async def __anext__(self) -> MarketEvent:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        """Number of events queued and not yet consumed."""
        return self._queue.qsize()

    def close(self) -> None:
        """Detach from the hub. Events already queued can still be read."""
        self._hub.detach(self)
        self._terminate()

    def _offer(self, item: object) -> None:
        if self._queue.full():
            # Slow consumer: drop the oldest event rather than block publishers
            self._queue.get_nowait()
            logger.warning("Event stream full, dropped oldest event")
        self._queue.put_nowait(item)

    def _terminate(self) -> None:
        if not self._closed:
            self._closed = True
            self._offer(_CLOSED)


class EventHub:
    """Publishes each MarketEvent to every attached EventStream."""

    def __init__(self, max_queue: int = 1000) -> None:
        self._max_queue = max_queue
        self._streams: list[EventStream] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def stream(self) -> EventStream:
        """Attach a new stream. Once the hub is closed the stream is already ended."""
        stream = EventStream(self, self._max_queue)
        if self._closed:
            stream._terminate()
        else:
            self._streams.append(stream)
        return stream

    def detach(self, stream: EventStream) -> None:
        if stream in self._streams:
            self._streams.remove(stream)

    def publish(self, event: MarketEvent) -> None:
        for stream in list(self._streams):
            stream._offer(event)

    def close(self) -> None:
        """Detach and end every stream, and every stream attached later."""
        self._closed = True
        streams, self._streams = self._streams, []
        for stream in streams:
            stream._terminate()

    def __len__(self) -> int:
        return len(self._streams)
