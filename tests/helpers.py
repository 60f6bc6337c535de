"""
Test helpers: SSE line builder and fake transports.

The fakes implement the transport capability directly, so session tests
run without httpx.
"""

import asyncio
import json
from typing import List, Optional

from stream_translator.ai.transport import BufferedText, ChunkStream


def sse_frame(content: str) -> bytes:
    """One 'data: {...}\\n' line carrying a delta."""
    payload = {"choices": [{"index": 0, "delta": {"content": content}}]}
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n".encode("utf-8")


class FakeChunkTransport:
    """
    Transport returning a ChunkStream over a fixed list of chunks.

    fail_at: index at which the chunk iterator raises ConnectionResetError
    hang_after: index after which the iterator blocks until cancelled
    encoding: charset the stream reports for its bytes
    """

    def __init__(
        self,
        chunks: List[bytes],
        status_code: int = 200,
        fail_at: Optional[int] = None,
        hang_after: Optional[int] = None,
        encoding: str = "utf-8",
    ):
        self.chunks = chunks
        self.status_code = status_code
        self.fail_at = fail_at
        self.hang_after = hang_after
        self.encoding = encoding
        self.calls = []
        self.closed = False
        self.started = asyncio.Event()

    async def __call__(self, url, request):
        self.calls.append((url, request))

        async def chunks():
            for index, chunk in enumerate(self.chunks):
                if self.fail_at is not None and index == self.fail_at:
                    raise ConnectionResetError("connection reset by peer")
                yield chunk
                if self.hang_after is not None and index == self.hang_after:
                    self.started.set()
                    await asyncio.Event().wait()

        async def close():
            self.closed = True

        return ChunkStream(status_code=self.status_code, chunks=chunks(), close=close, encoding=self.encoding)


class FakeBufferedTransport:
    """Transport that can only hand back the whole body as text."""

    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code
        self.calls = []

    async def __call__(self, url, request):
        self.calls.append((url, request))
        return BufferedText(status_code=self.status_code, text=self.text)


class FailingTransport:
    """Transport whose call itself fails (e.g. connection refused)."""

    def __init__(self, error: Exception):
        self.error = error
        self.calls = []

    async def __call__(self, url, request):
        self.calls.append((url, request))
        raise self.error
