"""
Chat Completion Request Builder

Turns a TranslationConfig plus the text to translate into a ready-to-send
OpenAI-compatible chat-completion request:
- Endpoint URL normalization
- Model and temperature resolution
- System / user message assembly

Everything here is pure; nothing touches the network.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List

from stream_translator import language_codes as lc
from stream_translator.config import (
    TranslationConfig,
    DEFAULT_API_URL,
    CHAT_COMPLETIONS_SUFFIX,
    VERSION_SEGMENT,
    DEFAULT_URL_SCHEME,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    MIN_TEMPERATURE,
    MAX_TEMPERATURE,
    DEFAULT_SYSTEM_PROMPT,
    USER_PROMPT_TEMPLATE,
)
from stream_translator.ai.exceptions import ConfigError
from stream_translator.logger import get_logger

logger = get_logger(__name__)

NUMERIC_PATTERN = re.compile(r"^[+-]?\d*\.?\d+$")
SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


class MessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"


@dataclass
class ChatMessage:
    role: MessageRole
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class ChatRequest:
    """A fully built request: where to send it, with which headers and body."""
    url: str
    headers: Dict[str, str]
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def messages(self) -> List[Dict[str, str]]:
        return self.body.get("messages", [])


def normalize_url(url: str) -> str:
    """
    Normalize an endpoint into a full chat-completions URL.

    Examples:
        >>> normalize_url('')
        'https://api.openai.com/v1/chat/completions'
        >>> normalize_url('https://x.com/')
        'https://x.com/v1/chat/completions'
        >>> normalize_url('x.com/v1')
        'https://x.com/v1/chat/completions'
    """
    url = (url or "").strip()
    if not url:
        return DEFAULT_API_URL

    scheme_match = SCHEME_PATTERN.match(url)
    if scheme_match:
        scheme, rest = scheme_match.group(0), url[scheme_match.end():]
    else:
        scheme, rest = DEFAULT_URL_SCHEME, url

    # Trailing slashes are stripped from the part after the scheme only
    url = scheme + rest.rstrip("/")

    if url.endswith(CHAT_COMPLETIONS_SUFFIX):
        return url
    if url.endswith(VERSION_SEGMENT):
        return url + "/chat/completions"
    return url + CHAT_COMPLETIONS_SUFFIX


def resolve_model(config: TranslationConfig) -> str:
    """
    Get the model to use for translation.

    Priority:
    1. extra_model (if set)
    2. model
    3. DEFAULT_MODEL
    """
    extra_model = (config.extra_model or "").strip()
    if extra_model:
        return extra_model
    model = (config.model or "").strip()
    if model:
        return model
    return DEFAULT_MODEL


def resolve_temperature(value: Any) -> float:
    """Parse a temperature string, falling back to the default and clamping to [0, 2]."""
    text = "" if value is None else str(value).strip()
    if not NUMERIC_PATTERN.match(text):
        return DEFAULT_TEMPERATURE
    temperature = float(text)
    return max(MIN_TEMPERATURE, min(MAX_TEMPERATURE, temperature))


def resolve_system_prompt(value: str) -> str:
    system_prompt = (value or "").strip()
    return system_prompt or DEFAULT_SYSTEM_PROMPT


def build_user_prompt(text: str, target_language: str) -> str:
    """Wrap the source text in the translation instruction."""
    return USER_PROMPT_TEMPLATE.format(
        target_language_name=lc.resolve_language_name(target_language),
        text=text,
    )


def build_headers(api_key: str) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }


def build_request(config: TranslationConfig, text: str, target_language: str) -> ChatRequest:
    """
    Build the chat-completion request for one translation.

    Args:
        config: Host-supplied translation settings
        text: Source text (sent verbatim inside the user message)
        target_language: Target language code or name

    Returns:
        ChatRequest with normalized URL, auth headers and a streaming body

    Raises:
        ConfigError: If the API key is empty after trimming
    """
    api_key = (config.api_key or "").strip()
    if not api_key:
        raise ConfigError("API key is required", field="api_key")

    messages = [
        ChatMessage(MessageRole.SYSTEM, resolve_system_prompt(config.system_prompt)),
        ChatMessage(MessageRole.USER, build_user_prompt(text, target_language)),
    ]

    body = {
        "model": resolve_model(config),
        "messages": [message.to_dict() for message in messages],
        "temperature": resolve_temperature(config.temperature),
        "stream": True,
    }

    url = normalize_url(config.url)
    logger.debug(f"Built chat request for {url} (model: {body['model']}, temperature: {body['temperature']})")

    return ChatRequest(url=url, headers=build_headers(api_key), body=body)
