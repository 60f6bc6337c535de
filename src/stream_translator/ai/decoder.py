"""
Incremental SSE Decoder

Turns the raw byte chunks of a streaming chat-completion response into the
ordered text deltas they carry. Chunks may be split anywhere: mid-line,
mid-JSON object, even mid-UTF-8 character. Whatever is not yet known to be
a complete frame stays in the decoder's residual buffer until more input
arrives (feed) or the stream ends (finish).

Malformed frames are dropped and logged; they never abort the stream.
"""

import codecs
import json
import re
from enum import Enum
from typing import Any, List, Optional, Tuple, Union

from stream_translator.ai.exceptions import describe_error_body
from stream_translator.logger import get_logger

logger = get_logger(__name__)

DATA_PREFIX = "data:"
DONE_MARKER = "[DONE]"

# Candidate boundary between two frames glued on one line: '...}data: {...'
BACK_TO_BACK_PATTERN = re.compile(r"(?<=\})(?=\s*data:)")
# Token framing: a 'data:' token at the start, after whitespace or right
# after a closing brace may start a new frame
TOKEN_SPLIT_PATTERN = re.compile(r"(?<![^\s}])(?=data:)")


class FramingMode(str, Enum):
    """How the byte stream is cut into frames."""
    AUTO = "auto"      # line framing, plus splitting of back-to-back frames
    LINES = "lines"    # strictly '\n'-delimited
    TOKENS = "tokens"  # a 'data:' token may start a frame mid-line


def extract_content(data: Any) -> str:
    """
    Get the text carried by one decoded frame.

    Streaming frames carry choices[0].delta.content; a complete (non-delta)
    response carries choices[0].message.content. Anything else yields ''.
    """
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""

    choice = choices[0]
    for key in ("delta", "message"):
        part = choice.get(key)
        if isinstance(part, dict):
            content = part.get("content")
            if isinstance(content, str) and content:
                return content
    return ""


class StreamDecoder:
    """
    Decoder for one response stream.

    One instance per in-flight stream; the residual buffer is per instance
    and is discarded by finish().
    """

    def __init__(self, framing: Union[FramingMode, str] = FramingMode.AUTO, encoding: str = "utf-8"):
        self.framing = FramingMode(framing)
        self._text_decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        self._finished = False
        # Set once a 'data: [DONE]' frame has been seen
        self.done = False
        self.frame_count = 0
        self.dropped_frames = 0

    @property
    def pending(self) -> str:
        """Text buffered but not yet known to be a complete frame."""
        return self._buffer

    def feed(self, chunk: Union[bytes, bytearray, memoryview, str]) -> List[str]:
        """
        Consume one chunk and return the deltas completed by it, in order.

        Never raises on malformed input.
        """
        self._ensure_open()
        if isinstance(chunk, str):
            # Bytes still pending from an earlier chunk come first
            text = self._text_decoder.decode(b"", final=True) + chunk
        else:
            text = self._text_decoder.decode(bytes(chunk))
        if not text:
            return []

        self._buffer += text
        return self._extract_all(self._take_complete_frames(), final=False)

    def finish(self) -> List[str]:
        """
        Flush the stream: one best-effort attempt on whatever partial frame
        remains, then clear all state. Must be called exactly once.
        """
        self._ensure_open()
        self._finished = True

        self._buffer += self._text_decoder.decode(b"", final=True)
        remainder, self._buffer = self._buffer, ""

        if self.framing is FramingMode.LINES:
            frames = [remainder]
        else:
            frames = self._split_line(remainder)

        deltas = self._extract_all(frames, final=True)
        logger.debug(
            f"Stream decoder finished: {self.frame_count} frames, "
            f"{self.dropped_frames} dropped, done marker seen: {self.done}"
        )
        return deltas

    def _ensure_open(self) -> None:
        if self._finished:
            raise RuntimeError("StreamDecoder.finish() has already been called")

    @property
    def _split_pattern(self):
        if self.framing is FramingMode.TOKENS:
            return TOKEN_SPLIT_PATTERN
        return BACK_TO_BACK_PATTERN

    def _take_complete_frames(self) -> List[str]:
        """Split complete frames off the buffer, keeping the trailing partial one."""
        lines = self._buffer.split("\n")
        # The last segment may be incomplete
        tail = lines.pop()
        if self.framing is FramingMode.LINES:
            self._buffer = tail
            return lines

        frames = []
        for line in lines:
            frames.extend(self._split_line(line))

        if self.framing is FramingMode.TOKENS:
            # The last token-delimited piece may still grow; keep it buffered
            pieces = TOKEN_SPLIT_PATTERN.split(tail)
            last = pieces.pop()
            joined, rest = _join_frames(pieces)
            frames.extend(joined)
            tail = "".join(rest) + last

        self._buffer = tail
        return frames

    def _split_line(self, line: str) -> List[str]:
        """Cut a complete line holding one or more glued frames into single frames."""
        if _is_complete_frame(line):
            return [line]

        frames = []
        pieces = self._split_pattern.split(line)
        while pieces:
            joined, rest = _join_frames(pieces)
            frames.extend(joined)
            if not rest:
                break
            # No complete frame starts at rest[0]: hand it on so it is dropped
            # and counted, then resume with the next piece
            frames.append(rest[0])
            pieces = rest[1:]
        return frames

    def _extract_all(self, frames: List[str], final: bool) -> List[str]:
        deltas = []
        for frame in frames:
            delta = self._extract(frame, final)
            if delta:
                deltas.append(delta)
        return deltas

    def _extract(self, frame: str, final: bool) -> Optional[str]:
        line = frame.strip()
        if not line or not line.startswith(DATA_PREFIX):
            # Blank keep-alives, SSE comments, 'event:' / 'id:' fields
            return None

        payload = line[len(DATA_PREFIX):].strip()
        if payload == DONE_MARKER:
            self.done = True
            return None

        self.frame_count += 1
        try:
            data = json.loads(payload)
        except ValueError as e:
            self._drop(line, f"invalid JSON ({e})", final)
            return None

        if isinstance(data, dict) and data.get("error"):
            self._drop(line, f"error frame: {describe_error_body(data)}", final)
            return None

        return extract_content(data) or None

    def _drop(self, line: str, reason: str, final: bool) -> None:
        """Skip a malformed frame and keep decoding."""
        self.dropped_frames += 1
        preview = line if len(line) <= 200 else line[:200] + "..."
        if final:
            # A truncated trailing fragment is expected when a stream is cut short
            logger.debug(f"Discarded trailing SSE fragment, {reason}: {preview}")
        else:
            logger.warning(f"Failed to parse SSE line, {reason}: {preview}")


def _is_complete_frame(text: str) -> bool:
    """
    True when text holds exactly one whole frame.

    Anything that is not a 'data:' frame counts as complete; a 'data:' frame
    is complete once its payload is '[DONE]' or parses as JSON. A prefix of a
    JSON object never parses, so a frame cut at a 'data:' token that sits
    inside a string is never mistaken for a whole one.
    """
    line = text.strip()
    if not line.startswith(DATA_PREFIX):
        return True
    payload = line[len(DATA_PREFIX):].strip()
    if payload == DONE_MARKER:
        return True
    try:
        json.loads(payload)
    except ValueError:
        return False
    return True


def _join_frames(pieces: List[str]) -> Tuple[List[str], List[str]]:
    """
    Re-join candidate pieces until each holds a complete frame.

    Returns (frames, rest) where rest are the trailing pieces that did not
    add up to a complete frame.
    """
    frames = []
    start = 0
    for end in range(len(pieces)):
        candidate = "".join(pieces[start:end + 1])
        if _is_complete_frame(candidate):
            frames.append(candidate)
            start = end + 1
    return frames, pieces[start:]
