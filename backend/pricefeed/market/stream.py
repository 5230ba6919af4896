"""SSE streaming endpoint for live quote events."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from .events import EventStream
from .service import MarketDataService

logger = logging.getLogger(__name__)

STREAMED_KINDS = frozenset({"quote", "update"})


def create_stream_router(service: MarketDataService) -> APIRouter:
    """Create the SSE router for one MarketDataService. Each request gets its own EventStream."""
    router = APIRouter(prefix="/api/stream", tags=["streaming"])

    @router.get("/quotes")
    async def stream_quotes(request: Request) -> StreamingResponse:
        """SSE endpoint for quote events.

        Each fetched quote and each poller update is sent as it happens:

            event: update
            data: {"kind": "update", "symbol": "AAPL", "quote": {...}, ...}

        Error events from provider startup are not forwarded to clients.
        """
        return StreamingResponse(
            _generate_events(service.events(), request),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering if proxied
            },
        )

    return router


def format_event(kind: str, payload: dict) -> str:
    return f"event: {kind}\ndata: {json.dumps(payload)}\n\n"


async def _generate_events(
    stream: EventStream,
    request: Request,
    heartbeat: float = 15.0,
) -> AsyncGenerator[str, None]:
    """Async generator that yields SSE-formatted quote events.

    Sends a comment line every `heartbeat` seconds without events so that
    client disconnects are noticed. Stops when the client disconnects or the
    service is destroyed.
    """
    # EventSource reconnect delay
    yield "retry: 1000\n\n"

    client_ip = request.client.host if request.client else "unknown"
    logger.info("SSE client connected: %s", client_ip)

    try:
        while True:
            if await request.is_disconnected():
                logger.info("SSE client disconnected: %s", client_ip)
                break

            try:
                event = await asyncio.wait_for(anext(stream), timeout=heartbeat)
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue
            except StopAsyncIteration:
                break

            if event.kind in STREAMED_KINDS:
                yield format_event(event.kind, event.to_dict())
    except asyncio.CancelledError:
        logger.info("SSE stream cancelled for: %s", client_ip)
    finally:
        stream.close()
