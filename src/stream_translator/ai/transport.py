"""
Transport Capability

The session never talks to the network directly; it awaits a transport:

    transport(url, TransportRequest) -> TransportResponse

A TransportResponse is one of two concrete shapes:
- ChunkStream: body exposed as an async iterator of byte chunks
- BufferedText: body only available as one fully-read text

HttpxTransport is the default implementation, built on httpx.AsyncClient.
"""

import codecs
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, Union

import httpx

from stream_translator.ai.exceptions import StreamError
from stream_translator.config import DEFAULT_TIMEOUT
from stream_translator.logger import get_logger

logger = get_logger(__name__)


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Convert timeout configuration to httpx.Timeout object.

    Args:
        timeout_config: Either a number (read timeout) or a dict with
            connect, write, read, pool keys

    Returns:
        httpx.Timeout object
    """
    if isinstance(timeout_config, dict):
        return httpx.Timeout(
            connect=timeout_config.get('connect', 10.0),
            write=timeout_config.get('write', 60.0),
            read=timeout_config.get('read', float(DEFAULT_TIMEOUT)),
            pool=timeout_config.get('pool', 10.0),
        )
    else:
        timeout_value = float(timeout_config) if timeout_config else float(DEFAULT_TIMEOUT)
        return httpx.Timeout(
            connect=10.0,
            write=60.0,
            read=timeout_value,
            pool=10.0,
        )


@dataclass
class TransportRequest:
    """What to send: method, headers and a JSON-serializable body."""
    method: str = "POST"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)
    timeout: Any = DEFAULT_TIMEOUT


class TransportResponse:
    """Common part of both response shapes."""

    status_code: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass
class BufferedText(TransportResponse):
    """A response whose body has already been read completely."""
    status_code: int
    text: str = ""


@dataclass
class ChunkStream(TransportResponse):
    """
    A response whose body is pulled chunk by chunk.

    ``close`` releases the underlying connection; aclose() is idempotent and
    must be awaited on every exit path by whoever consumes the stream.
    """
    status_code: int
    chunks: AsyncIterator[bytes]
    close: Optional[Callable[[], Awaitable[None]]] = None
    encoding: str = "utf-8"
    _closed: bool = field(default=False, init=False, repr=False)

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self.close is not None:
            await self.close()

    async def read_text(self) -> str:
        """Drain the remaining chunks into one string (used for error bodies)."""
        parts = []
        async for chunk in self.chunks:
            parts.append(chunk if isinstance(chunk, bytes) else str(chunk).encode(self.encoding))
        return b"".join(parts).decode(self.encoding, errors="replace")


Transport = Callable[[str, TransportRequest], Awaitable[Union[ChunkStream, BufferedText]]]


class HttpxTransport:
    """
    Default transport: POSTs the JSON body with httpx and streams the response.

    Pass an existing httpx.AsyncClient to share connection pools between
    sessions; otherwise a client is created per request and closed together
    with the stream.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client

    async def __call__(self, url: str, request: TransportRequest) -> ChunkStream:
        owns_client = self._client is None
        client = self._client or httpx.AsyncClient(timeout=get_httpx_timeout(request.timeout))

        logger.debug(f"  Sending {request.method} {url} (stream)...")

        # Until the response is handed out, an owned client is closed here on
        # any exit, cancellation included
        sent = False
        try:
            http_request = client.build_request(
                request.method,
                url,
                headers=request.headers,
                json=request.body,
                timeout=get_httpx_timeout(request.timeout),
            )
            response = await client.send(http_request, stream=True)
            sent = True
        except httpx.TimeoutException as e:
            raise StreamError(f"Request to {url} timed out", details={"url": url}) from e
        except httpx.HTTPError as e:
            raise StreamError(f"Request to {url} failed: {e}", details={"url": url}) from e
        finally:
            if owns_client and not sent:
                await client.aclose()

        async def close() -> None:
            try:
                await response.aclose()
            finally:
                if owns_client:
                    await client.aclose()

        logger.debug(f"  Response status {response.status_code} from {url}")
        return ChunkStream(
            status_code=response.status_code,
            chunks=response.aiter_bytes(),
            close=close,
            encoding=_known_encoding(response.charset_encoding),
        )


def _known_encoding(charset: Optional[str]) -> str:
    """The response charset if Python has a codec for it, else utf-8."""
    if not charset:
        return "utf-8"
    try:
        codecs.lookup(charset)
    except LookupError:
        logger.warning(f"Unknown response charset '{charset}', decoding as utf-8")
        return "utf-8"
    return charset
