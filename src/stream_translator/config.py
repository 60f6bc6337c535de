import json
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional

from stream_translator.logger import get_logger

logger = get_logger(__name__)

# Endpoint constants
DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
CHAT_COMPLETIONS_SUFFIX = "/v1/chat/completions"
VERSION_SEGMENT = "/v1"
DEFAULT_URL_SCHEME = "https://"

# Model / sampling constants
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.6
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0

# Request timeout in seconds (read timeout for streaming responses)
DEFAULT_TIMEOUT = 60

# Framing modes accepted by the stream decoder
FRAMING_MODES = ("auto", "lines", "tokens")

# Default prompts
DEFAULT_SYSTEM_PROMPT = (
    "You are a professional multilingual translation expert with deep knowledge of "
    "linguistics, cultural nuances, and technical terminology. Your goal is to provide "
    "accurate, natural, and context-aware translations across multiple languages."
)

USER_PROMPT_TEMPLATE = (
    "Translate the following content into {target_language_name}. "
    "Only return the translated content without explanations or additional notes:\n\n{text}"
)

# Host-facing field names and their defaults
DEFAULT_CONFIG = {
    "url": "",
    "apiKey": "",
    "model": "",
    "temperature": "",
    "extra_model": "",
    "system_prompt": "",
    "stream": "true",
}


def _as_text(value: Any) -> str:
    """Coerce a host-supplied config value to a string ('' for None)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return _as_text(value).strip().lower() in ("true", "1", "yes", "on")


@dataclass
class TranslationConfig:
    """Translation settings as supplied by the host application.

    Values are kept as given; normalization happens when a request is built
    (see ai.request_builder).
    """
    api_key: str = ""
    url: str = ""
    model: str = ""
    extra_model: str = ""
    temperature: str = ""
    system_prompt: str = ""
    # Accepted for compatibility; requests always stream
    stream: bool = True
    timeout: float = DEFAULT_TIMEOUT
    strip_quotes: bool = True
    framing: str = "auto"

    def __post_init__(self):
        if self.framing not in FRAMING_MODES:
            raise ValueError(
                f"Unknown framing mode '{self.framing}', expected one of {', '.join(FRAMING_MODES)}"
            )
        if not self.stream:
            logger.debug("Non-streaming mode requested; requests are always streamed")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TranslationConfig":
        """
        Build a config from the host's field names.

        Accepts both ``apiKey`` (host style) and ``api_key``. Missing fields
        fall back to DEFAULT_CONFIG.

        Args:
            data: Mapping with keys url, apiKey, model, temperature,
                extra_model, system_prompt, stream and optionally timeout,
                strip_quotes, framing

        Returns:
            TranslationConfig instance
        """
        merged = {**DEFAULT_CONFIG, **(data or {})}
        api_key = merged.get("api_key")
        if api_key is None:
            api_key = merged.get("apiKey")

        timeout = merged.get("timeout")
        return cls(
            api_key=_as_text(api_key),
            url=_as_text(merged.get("url")),
            model=_as_text(merged.get("model")),
            extra_model=_as_text(merged.get("extra_model")),
            temperature=_as_text(merged.get("temperature")),
            system_prompt=_as_text(merged.get("system_prompt")),
            stream=_as_bool(merged.get("stream"), True),
            timeout=float(timeout) if timeout not in (None, "") else DEFAULT_TIMEOUT,
            strip_quotes=_as_bool(merged.get("strip_quotes"), True),
            framing=_as_text(merged.get("framing") or "auto").strip().lower(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def describe(self) -> str:
        """JSON summary safe for logs (API key masked)."""
        data = self.to_dict()
        data["api_key"] = mask_secret(self.api_key)
        return json.dumps(data, ensure_ascii=False)


def mask_secret(value: str) -> str:
    """Mask all but the last four characters of a secret."""
    value = (value or "").strip()
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]
