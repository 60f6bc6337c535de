"""
AI Module

This module provides the chat-completion client pieces:
- Request building for OpenAI-compatible endpoints
- Incremental SSE decoding
- The transport capability and its httpx implementation
"""

from stream_translator.ai.exceptions import TranslationError, ConfigError, UpstreamError, StreamError
from stream_translator.ai.request_builder import ChatMessage, ChatRequest, MessageRole, build_request, normalize_url
from stream_translator.ai.decoder import FramingMode, StreamDecoder
from stream_translator.ai.transport import BufferedText, ChunkStream, HttpxTransport, TransportRequest

__all__ = [
    'TranslationError',
    'ConfigError',
    'UpstreamError',
    'StreamError',
    'ChatMessage',
    'ChatRequest',
    'MessageRole',
    'build_request',
    'normalize_url',
    'FramingMode',
    'StreamDecoder',
    'BufferedText',
    'ChunkStream',
    'HttpxTransport',
    'TransportRequest',
]
