"""
stream_translator

Streaming translation client for OpenAI-compatible chat-completion endpoints.
The translated text is revealed incrementally as Server-Sent-Events arrive.
"""

from stream_translator.ai import (
    ConfigError,
    StreamDecoder,
    StreamError,
    TranslationError,
    UpstreamError,
    build_request,
    normalize_url,
)
from stream_translator.config import TranslationConfig
from stream_translator.translation import (
    SessionState,
    TranslationProgress,
    TranslationSession,
    finalize_result,
    translate,
    translate_sync,
)

__version__ = "0.1.0"

__all__ = [
    'TranslationConfig',
    'TranslationSession',
    'SessionState',
    'TranslationProgress',
    'StreamDecoder',
    'build_request',
    'normalize_url',
    'finalize_result',
    'translate',
    'translate_sync',
    'TranslationError',
    'ConfigError',
    'UpstreamError',
    'StreamError',
]
