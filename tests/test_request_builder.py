"""Tests for stream_translator.ai.request_builder."""

import pytest

from stream_translator.ai.exceptions import ConfigError
from stream_translator.ai.request_builder import (
    build_request,
    build_user_prompt,
    normalize_url,
    resolve_model,
    resolve_system_prompt,
    resolve_temperature,
)
from stream_translator.config import (
    DEFAULT_API_URL,
    DEFAULT_MODEL,
    DEFAULT_SYSTEM_PROMPT,
    TranslationConfig,
)

URL_SAMPLES = [
    "",
    "   ",
    "https://x.com/",
    "https://x.com/v1",
    "https://x.com/v1/",
    "https://x.com/v1/chat/completions",
    "x.com",
    "  x.com/v1///  ",
    "http://localhost:8080",
    "https://proxy.example.org/openai",
    "https://",
    "///",
]


@pytest.mark.unit
class TestNormalizeUrl:

    def test_empty_uses_default_endpoint(self):
        assert normalize_url("") == DEFAULT_API_URL
        assert normalize_url("   ") == DEFAULT_API_URL
        assert normalize_url(None) == DEFAULT_API_URL

    def test_trailing_slash(self):
        assert normalize_url("https://x.com/") == "https://x.com/v1/chat/completions"

    def test_version_segment_not_duplicated(self):
        assert normalize_url("https://x.com/v1") == "https://x.com/v1/chat/completions"
        assert normalize_url("https://x.com/v1//") == "https://x.com/v1/chat/completions"

    def test_scheme_added_when_missing(self):
        assert normalize_url("x.com") == "https://x.com/v1/chat/completions"
        assert normalize_url("  x.com/v1///  ") == "https://x.com/v1/chat/completions"

    def test_existing_scheme_kept(self):
        assert normalize_url("http://localhost:8080") == "http://localhost:8080/v1/chat/completions"

    def test_canonical_url_unchanged(self):
        url = "https://x.com/v1/chat/completions"
        assert normalize_url(url) == url
        assert normalize_url(url + "/") == url

    @pytest.mark.parametrize("url", URL_SAMPLES)
    def test_idempotent(self, url):
        once = normalize_url(url)
        assert normalize_url(once) == once
        assert once.endswith("/v1/chat/completions")


@pytest.mark.unit
class TestResolveTemperature:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1.5", 1.5),
            ("3", 2.0),
            ("-1", 0.0),
            ("abc", 0.6),
            ("", 0.6),
            (None, 0.6),
            (" .5 ", 0.5),
            ("+1", 1.0),
            ("1.", 0.6),
            ("1e2", 0.6),
            ("0", 0.0),
        ],
    )
    def test_parse_and_clamp(self, value, expected):
        assert resolve_temperature(value) == expected


@pytest.mark.unit
class TestResolveModel:

    def test_extra_model_wins(self):
        assert resolve_model(TranslationConfig(extra_model="m2", model="m1")) == "m2"

    def test_model_when_extra_empty(self):
        assert resolve_model(TranslationConfig(extra_model="", model="m1")) == "m1"
        assert resolve_model(TranslationConfig(extra_model="   ", model=" m1 ")) == "m1"

    def test_default_when_both_empty(self):
        assert resolve_model(TranslationConfig()) == DEFAULT_MODEL


@pytest.mark.unit
def test_system_prompt_default_and_override():
    assert resolve_system_prompt("") == DEFAULT_SYSTEM_PROMPT
    assert resolve_system_prompt("   ") == DEFAULT_SYSTEM_PROMPT
    assert resolve_system_prompt("  Be terse.  ") == "Be terse."


@pytest.mark.unit
def test_user_prompt_names_target_language():
    prompt = build_user_prompt("Hello world", "es")
    assert prompt.startswith("Translate the following content into Spanish.")
    assert prompt.endswith("\n\nHello world")

    # Free-form names pass through unchanged
    assert "into Klingon." in build_user_prompt("Hello", "Klingon")


@pytest.mark.unit
class TestBuildRequest:

    def test_missing_api_key(self):
        with pytest.raises(ConfigError) as exc_info:
            build_request(TranslationConfig(api_key="   "), "hi", "es")
        assert exc_info.value.field == "api_key"
        assert exc_info.value.code == "config_invalid"

    def test_request_shape(self):
        config = TranslationConfig(
            api_key="  sk-abc  ",
            url="https://x.com/v1",
            model="m1",
            temperature="0.2",
            system_prompt="Custom persona",
        )
        request = build_request(config, "Good morning", "fr")

        assert request.url == "https://x.com/v1/chat/completions"
        assert request.headers == {
            "Content-Type": "application/json",
            "Authorization": "Bearer sk-abc",
        }
        assert request.body["model"] == "m1"
        assert request.body["temperature"] == 0.2
        assert request.body["stream"] is True

        system, user = request.messages
        assert system == {"role": "system", "content": "Custom persona"}
        assert user["role"] == "user"
        assert "into French." in user["content"]
        assert user["content"].endswith("Good morning")

    def test_stream_always_requested(self):
        request = build_request(TranslationConfig(api_key="k", stream=False), "hi", "de")
        assert request.body["stream"] is True

    def test_defaults(self):
        request = build_request(TranslationConfig(api_key="k"), "hi", "de")
        assert request.url == DEFAULT_API_URL
        assert request.body["model"] == DEFAULT_MODEL
        assert request.body["temperature"] == 0.6
        assert request.messages[0]["content"] == DEFAULT_SYSTEM_PROMPT
