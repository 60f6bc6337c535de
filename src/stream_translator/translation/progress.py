"""
Translation Progress Data Class

Contains the TranslationProgress dataclass for observing a running session.
"""

from dataclasses import dataclass


@dataclass
class TranslationProgress:
    """Snapshot of one translation session."""
    state: str
    delta_count: int = 0             # Deltas applied to the accumulated result
    char_count: int = 0              # Length of the accumulated (unfinalized) result
    chunk_count: int = 0             # Chunks received from the transport
    dropped_frames: int = 0          # Malformed SSE frames skipped by the decoder
    done_marker_seen: bool = False   # 'data: [DONE]' arrived before end of input
