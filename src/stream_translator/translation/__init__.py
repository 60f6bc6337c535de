"""
Translation module - Session orchestration

This module provides:
- TranslationSession: one streaming translation call and its state machine
- TranslationProgress: Progress snapshot dataclass
- translate / translate_sync: one-shot helpers
"""

from stream_translator.translation.progress import TranslationProgress
from stream_translator.translation.session import (
    SessionState,
    TranslationSession,
    finalize_result,
    translate,
    translate_sync,
)
