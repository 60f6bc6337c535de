"""
Shared pytest fixtures for the stream_translator test suite.

Fixtures:
- config: a ready-to-use TranslationConfig
- hello_chunks: two SSE lines streaming "He" + "llo"
"""

from typing import List

import pytest

from stream_translator.config import TranslationConfig
from tests.helpers import sse_frame


@pytest.fixture
def config() -> TranslationConfig:
    return TranslationConfig(api_key="sk-test", url="https://api.test", model="gpt-4o-mini")


@pytest.fixture
def hello_chunks() -> List[bytes]:
    return [sse_frame("He"), sse_frame("llo")]
