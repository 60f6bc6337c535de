"""Tests for stream_translator.config, language codes and logging setup."""

import logging

import pytest

from stream_translator import language_codes as lc
from stream_translator import logger as logger_module
from stream_translator.config import DEFAULT_TIMEOUT, TranslationConfig, mask_secret


@pytest.mark.unit
class TestTranslationConfig:

    def test_from_host_fields(self):
        config = TranslationConfig.from_dict({
            "url": "https://x.com",
            "apiKey": "sk-1",
            "model": "m1",
            "temperature": "0.3",
            "extra_model": "m2",
            "system_prompt": "Be brief.",
            "stream": "false",
        })

        assert config.api_key == "sk-1"
        assert config.url == "https://x.com"
        assert config.model == "m1"
        assert config.extra_model == "m2"
        assert config.temperature == "0.3"
        assert config.system_prompt == "Be brief."
        assert config.stream is False
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.strip_quotes is True
        assert config.framing == "auto"

    def test_api_key_alias_and_missing_fields(self):
        config = TranslationConfig.from_dict({"api_key": "sk-2"})
        assert config.api_key == "sk-2"
        assert config.url == ""
        assert config.stream is True

    def test_none_and_numbers(self):
        config = TranslationConfig.from_dict({"apiKey": None, "temperature": 1.2, "timeout": "15"})
        assert config.api_key == ""
        assert config.temperature == "1.2"
        assert config.timeout == 15.0

    def test_empty_input(self):
        assert TranslationConfig.from_dict(None) == TranslationConfig()

    def test_optional_switches(self):
        config = TranslationConfig.from_dict({"apiKey": "k", "strip_quotes": "false", "framing": "TOKENS"})
        assert config.strip_quotes is False
        assert config.framing == "tokens"

    def test_unknown_framing(self):
        with pytest.raises(ValueError, match="framing"):
            TranslationConfig(api_key="k", framing="words")

    def test_describe_masks_key(self):
        summary = TranslationConfig(api_key="sk-secret-1234").describe()
        assert "sk-secret" not in summary
        assert "1234" in summary


@pytest.mark.unit
def test_mask_secret():
    assert mask_secret("") == ""
    assert mask_secret("abc") == "***"
    assert mask_secret("abcdefgh") == "****efgh"


@pytest.mark.unit
class TestLanguageCodes:

    @pytest.mark.parametrize(
        "language, expected",
        [
            ("es", "Spanish"),
            ("ES", "Spanish"),
            ("zh_cn", "Chinese (Simplified, China)"),
            ("pt-BR", "Portuguese (Brazil)"),
            ("es-CL", "Spanish"),
            ("Klingon", "Klingon"),
            ("  French  ", "French"),
        ],
    )
    def test_resolve_language_name(self, language, expected):
        assert lc.resolve_language_name(language) == expected

    def test_auto_detect(self):
        assert lc.is_auto_detect("auto")
        assert lc.is_auto_detect(None)
        assert not lc.is_auto_detect("en")


@pytest.mark.unit
class TestLogger:

    @pytest.fixture(autouse=True)
    def reset_log_mode(self, monkeypatch):
        yield
        monkeypatch.delenv(logger_module.LOG_MODE_ENV, raising=False)
        monkeypatch.delenv(logger_module.LOG_FILE_ENV, raising=False)
        logger_module.clear_log_mode_cache()

    def test_off_by_default(self, monkeypatch):
        monkeypatch.delenv(logger_module.LOG_MODE_ENV, raising=False)
        logger_module.clear_log_mode_cache()

        log = logger_module.get_logger("stream_translator.test.off")
        assert not log.isEnabledFor(logging.CRITICAL)

    def test_debug_mode_with_file(self, monkeypatch, tmp_path):
        log_file = tmp_path / "translator.log"
        monkeypatch.setenv(logger_module.LOG_MODE_ENV, "debug")
        monkeypatch.setenv(logger_module.LOG_FILE_ENV, str(log_file))
        logger_module.clear_log_mode_cache()

        log = logger_module.get_logger("stream_translator.test.debug")
        log.debug("decoder ready")
        for handler in log.handlers:
            handler.flush()

        assert log.isEnabledFor(logging.DEBUG)
        assert "decoder ready" in log_file.read_text(encoding="utf-8")

    def test_cache_clear_updates_existing_loggers(self, monkeypatch):
        monkeypatch.setenv(logger_module.LOG_MODE_ENV, "info")
        logger_module.clear_log_mode_cache()
        log = logger_module.get_logger("stream_translator.test.switch")
        assert log.isEnabledFor(logging.INFO)

        monkeypatch.setenv(logger_module.LOG_MODE_ENV, "off")
        logger_module.clear_log_mode_cache()
        assert not log.isEnabledFor(logging.INFO)
