"""
Translation Session

Runs one streaming translation call end to end:

    build request -> transport -> StreamDecoder (per chunk) -> sink -> result

States: IDLE -> REQUEST_SENT -> STREAMING -> COMPLETED, or FAILED from
REQUEST_SENT / STREAMING. A session object is single-use.
"""

import asyncio
import json
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from stream_translator import language_codes as lc
from stream_translator.ai.decoder import StreamDecoder, extract_content
from stream_translator.ai.exceptions import ConfigError, StreamError, TranslationError, UpstreamError
from stream_translator.ai.request_builder import build_request
from stream_translator.ai.transport import (
    BufferedText,
    ChunkStream,
    HttpxTransport,
    Transport,
    TransportRequest,
)
from stream_translator.config import TranslationConfig
from stream_translator.logger import get_logger
from stream_translator.translation.progress import TranslationProgress

logger = get_logger(__name__)

Sink = Callable[[str], None]

QUOTE_CHAR = '"'


class SessionState(str, Enum):
    IDLE = "idle"
    REQUEST_SENT = "request_sent"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


def finalize_result(text: str, strip_quotes: bool = True) -> str:
    """
    Post-process the accumulated text into the final translation.

    Trims whitespace; with strip_quotes, one pair of wrapping double quotes
    (some models answer '"Hola"') is removed as well.

    Examples:
        >>> finalize_result('  "Hola"\\n')
        'Hola'
        >>> finalize_result('"Hola"', strip_quotes=False)
        '"Hola"'
        >>> finalize_result('Say "hi"')
        'Say "hi"'
    """
    result = (text or "").strip()
    if strip_quotes and len(result) >= 2 and result.startswith(QUOTE_CHAR) and result.endswith(QUOTE_CHAR):
        result = result[1:-1].strip()
    return result


class TranslationSession:
    """One translation call against an OpenAI-compatible streaming endpoint."""

    def __init__(self, transport: Optional[Transport] = None):
        self.transport = transport or HttpxTransport()
        self.state = SessionState.IDLE
        self.result = ""
        self.error: Optional[TranslationError] = None
        self._decoder: Optional[StreamDecoder] = None
        self._delta_count = 0
        self._chunk_count = 0

    @property
    def progress(self) -> TranslationProgress:
        decoder = self._decoder
        return TranslationProgress(
            state=self.state.value,
            delta_count=self._delta_count,
            char_count=len(self.result),
            chunk_count=self._chunk_count,
            dropped_frames=decoder.dropped_frames if decoder else 0,
            done_marker_seen=decoder.done if decoder else False,
        )

    async def translate(
        self,
        text: str,
        source_language: Optional[str],
        target_language: str,
        config: TranslationConfig,
        sink: Optional[Sink] = None,
    ) -> str:
        """
        Translate text, reporting the growing partial result to sink.

        Args:
            text: Source text
            source_language: Source language code (informational; may be 'auto')
            target_language: Target language code or name
            config: Endpoint, key, model and sampling settings
            sink: Called with the accumulated result after every delta

        Returns:
            The finalized translation

        Raises:
            ConfigError: Empty text, missing target language or API key
            UpstreamError: Non-success HTTP status
            StreamError: Transport failure before or during streaming
        """
        if self.state is not SessionState.IDLE:
            raise RuntimeError(f"TranslationSession already used (state: {self.state.value})")

        try:
            if not text:
                raise ConfigError("Translation text cannot be empty", field="text")
            if not target_language or not target_language.strip():
                raise ConfigError("Target language cannot be empty", field="target_language")
            chat_request = build_request(config, text, target_language)
        except ConfigError as e:
            self._fail(e)
            raise

        source_display = "auto" if lc.is_auto_detect(source_language) else source_language
        logger.info(
            f"Translating {len(text)} chars from {source_display} to {target_language} "
            f"(model: {chat_request.body['model']})"
        )

        self.state = SessionState.REQUEST_SENT
        transport_request = TransportRequest(
            method="POST",
            headers=chat_request.headers,
            body=chat_request.body,
            timeout=config.timeout,
        )

        try:
            response = await self.transport(chat_request.url, transport_request)
        except TranslationError as e:
            self._fail(e)
            raise
        except asyncio.CancelledError:
            self.state = SessionState.FAILED
            raise
        except Exception as e:
            error = StreamError(f"Request failed: {e}", details={"url": chat_request.url})
            self._fail(error)
            raise error from e

        encoding = response.encoding if isinstance(response, ChunkStream) else "utf-8"
        self._decoder = StreamDecoder(framing=config.framing, encoding=encoding)

        if isinstance(response, ChunkStream):
            await self._consume_stream(response, sink)
        elif isinstance(response, BufferedText):
            self._consume_buffered(response, sink)
        else:
            error = StreamError(f"Unsupported transport response: {type(response).__name__}")
            self._fail(error)
            raise error

        final = finalize_result(self.result, strip_quotes=config.strip_quotes)
        self.state = SessionState.COMPLETED
        logger.info(f"Translation completed: {len(final)} chars in {self._delta_count} deltas")
        return final

    async def _consume_stream(self, response: ChunkStream, sink: Optional[Sink]) -> None:
        try:
            if not response.ok:
                raise self._upstream_error(response.status_code, await response.read_text())

            self.state = SessionState.STREAMING
            async for chunk in response.chunks:
                self._chunk_count += 1
                self._apply(self._decoder.feed(chunk), sink)
            self._apply(self._decoder.finish(), sink)
        except TranslationError as e:
            self._fail(e)
            raise
        except asyncio.CancelledError:
            self.state = SessionState.FAILED
            raise
        except Exception as e:
            error = StreamError(f"Stream reading error: {e}")
            self._fail(error)
            raise error from e
        finally:
            await response.aclose()

    def _consume_buffered(self, response: BufferedText, sink: Optional[Sink]) -> None:
        if not response.ok:
            error = self._upstream_error(response.status_code, response.text)
            self._fail(error)
            raise error

        self.state = SessionState.STREAMING
        self._chunk_count += 1
        text = response.text or ""

        if text.lstrip().startswith("{"):
            # A server that ignored 'stream: true' answers with one JSON completion
            try:
                self._apply([self._completion_content(response.status_code, text)], sink)
            except TranslationError as e:
                self._fail(e)
                raise
            return

        self._apply(self._decoder.feed(text), sink)
        self._apply(self._decoder.finish(), sink)

    def _completion_content(self, status_code: int, text: str) -> str:
        """Message content of a plain (non-SSE) chat-completion body."""
        try:
            data = json.loads(text)
        except ValueError as e:
            raise StreamError(f"Invalid response format from API: {e}", details={"body": text[:500]}) from e

        if isinstance(data, dict) and data.get("error"):
            raise self._upstream_error(status_code, text)

        content = extract_content(data)
        if not content:
            raise StreamError("Invalid response format from API: no message content", details={"body": text[:500]})
        return content

    def _apply(self, deltas: List[str], sink: Optional[Sink]) -> None:
        for delta in deltas:
            self.result += delta
            self._delta_count += 1
            if sink is not None:
                sink(self.result)

    def _upstream_error(self, status_code: int, body: str) -> UpstreamError:
        error = UpstreamError(status_code, body)
        logger.error(f"Upstream error: {error}")
        return error

    def _fail(self, error: TranslationError) -> None:
        self.state = SessionState.FAILED
        self.error = error


def _coerce_config(config: Union[TranslationConfig, Dict[str, Any]]) -> TranslationConfig:
    if isinstance(config, TranslationConfig):
        return config
    return TranslationConfig.from_dict(config)


async def translate(
    text: str,
    source_language: Optional[str],
    target_language: str,
    config: Union[TranslationConfig, Dict[str, Any]],
    sink: Optional[Sink] = None,
    transport: Optional[Transport] = None,
) -> str:
    """Run one translation in a fresh session. config may be the host's field dict."""
    session = TranslationSession(transport)
    return await session.translate(text, source_language, target_language, _coerce_config(config), sink)


def translate_sync(
    text: str,
    source_language: Optional[str],
    target_language: str,
    config: Union[TranslationConfig, Dict[str, Any]],
    sink: Optional[Sink] = None,
    transport: Optional[Transport] = None,
) -> str:
    """Blocking wrapper around translate() for hosts without an event loop."""
    return asyncio.run(translate(text, source_language, target_language, config, sink, transport))
