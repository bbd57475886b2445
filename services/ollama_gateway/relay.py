"""Relays Ollama's streaming body to the caller as server-sent events.

A reader task pulls byte chunks off the upstream response and hands them
to the response generator through a bounded queue. Each upstream chunk
becomes exactly one event, in arrival order. Closing the relay cancels the
reader and releases the upstream response, whether or not any event was
read yet.
"""

import asyncio
import logging
import re
from typing import AsyncIterator, Optional

import httpx

from config import STREAM_QUEUE_SIZE
from exceptions import UpstreamStreamBroken

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}

_END = object()
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def decode_chunk(chunk: bytes) -> str:
    """UTF-8 decode one upstream chunk; an undecodable chunk is relayed as empty text."""
    try:
        return chunk.decode("utf-8")
    except UnicodeDecodeError:
        return ""


def format_sse_event(data: str) -> str:
    """Frame a payload as one SSE event, one ``data:`` field per line."""
    return "".join(f"data: {line}\n" for line in _LINE_BREAK.split(data)) + "\n"


async def single_event(data: str) -> AsyncIterator[str]:
    yield format_sse_event(data)


class StreamRelay:
    def __init__(self, response: httpx.Response, maxsize: int = STREAM_QUEUE_SIZE):
        self._response = response
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.task: Optional[asyncio.Task] = None
        self._events: Optional[AsyncIterator[str]] = None

    def __aiter__(self):
        return self

    async def __anext__(self) -> str:
        if self._events is None:
            self._events = self.events()
        return await self._events.__anext__()

    async def aclose(self):
        """Stop relaying and release the upstream response. Safe to call twice."""
        if self._events is not None:
            await self._events.aclose()
        await self._response.aclose()

    async def _pump(self):
        try:
            async for chunk in self._response.aiter_bytes():
                await self._queue.put(decode_chunk(chunk))
        except httpx.HTTPError as e:
            logger.warning("Ollama stream broke off: %s", e)
            await self._queue.put(str(UpstreamStreamBroken(str(e))))
        except Exception as e:
            # Not an upstream failure; re-raised on the consumer side.
            await self._queue.put(e)
            return
        finally:
            await self._response.aclose()
        await self._queue.put(_END)

    async def events(self) -> AsyncIterator[str]:
        self.task = asyncio.create_task(self._pump())
        try:
            while True:
                item = await self._queue.get()
                if item is _END:
                    break
                if isinstance(item, Exception):
                    raise item
                yield format_sse_event(item)
        finally:
            if not self.task.done():
                logger.debug("Client disconnected, stopping Ollama relay")
                self.task.cancel()
