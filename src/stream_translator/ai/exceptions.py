"""
Translation Client Exceptions

This module contains exception classes for the translation client.
Separated to avoid circular imports between the request builder,
transport and session modules.
"""

import json
from typing import Any, Optional


class TranslationError(Exception):
    """Translation service error with optional code and details."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigError(TranslationError):
    """Invalid call or configuration (missing API key, empty text, no target language)."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, code="config_invalid", details={"field": field} if field else {})
        self.field = field


class UpstreamError(TranslationError):
    """The endpoint answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: Any = None, provider: str = "API"):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"{provider} request failed ({status_code}): {describe_error_body(body)}",
            code="upstream_error",
            details={"status_code": status_code, "body": body},
        )


class StreamError(TranslationError):
    """Transport failure while connecting or while reading the response stream."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="stream_error", details=details)


def describe_error_body(body: Any) -> str:
    """
    Extract a short, human-readable error text from an error response body.

    Understands the OpenAI-style ``{"error": {"message": ...}}`` and the
    plain ``{"error": "..."}`` shapes; anything else is truncated to 500 chars.
    """
    if body is None or body == "":
        return "Unknown error"

    error_json = body
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            error_json = json.loads(body)
        except ValueError:
            return body[:500]

    if isinstance(error_json, dict) and "error" in error_json:
        error_detail = error_json["error"]
        if isinstance(error_detail, dict):
            return str(error_detail.get("message", error_detail))
        return str(error_detail)

    if isinstance(error_json, (dict, list)):
        return json.dumps(error_json, ensure_ascii=False)[:500]
    return str(error_json)[:500]
