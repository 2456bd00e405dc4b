"""Tests for fwcore settings and logging."""

import json
import logging

import pytest

from fwcore.config import Settings, get_settings
from fwcore.logging import JsonFormatter, get_logger, setup_logging, setup_tracing


class TestSettings:
    def test_defaults(self, monkeypatch):
        for key in Settings.model_fields:
            monkeypatch.delenv(key, raising=False)
        settings = get_settings()
        assert settings.FW_LOG_LEVEL == "INFO"
        assert settings.FW_DEFAULT_OCTAVE == 3
        assert settings.FW_EASY_SPAN == 3
        assert settings.FW_HARD_SPAN == 5
        assert settings.FW_MAX_FRETS == 24
        assert settings.FW_OTEL_ENDPOINT is None

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FW_DEFAULT_OCTAVE", "4")
        monkeypatch.setenv("FW_MAX_FRETS", "15")
        settings = get_settings()
        assert settings.FW_DEFAULT_OCTAVE == 4
        assert settings.FW_MAX_FRETS == 15

    def test_empty_values_ignored(self, monkeypatch):
        monkeypatch.setenv("FW_LOG_LEVEL", "")
        assert get_settings().FW_LOG_LEVEL == "INFO"

    def test_unknown_keys_ignored(self):
        settings = Settings.model_validate({"FW_ENV": "test", "FW_UNKNOWN": "1"})
        assert settings.FW_ENV == "test"
        assert not hasattr(settings, "FW_UNKNOWN")
        assert Settings.model_config["extra"] == "ignore"

    def test_memoized(self):
        assert get_settings() is get_settings()

    @pytest.mark.parametrize(
        "key,value",
        [("FW_DEFAULT_OCTAVE", "12"), ("FW_MAX_FRETS", "zero"), ("FW_EASY_SPAN", "0")],
    )
    def test_invalid_values(self, monkeypatch, key, value):
        monkeypatch.setenv(key, value)
        with pytest.raises(ValueError):
            get_settings()

    def test_hard_span_not_below_easy(self, monkeypatch):
        monkeypatch.setenv("FW_EASY_SPAN", "4")
        monkeypatch.setenv("FW_HARD_SPAN", "3")
        with pytest.raises(ValueError):
            get_settings()


class TestLogging:
    def test_json_formatter(self):
        record = logging.LogRecord("fwtest", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        payload = json.loads(JsonFormatter().format(record))
        assert payload["level"] == "INFO"
        assert payload["name"] == "fwtest"
        assert payload["message"] == "hello world"
        assert "time" in payload

    def test_json_formatter_extras(self):
        record = logging.LogRecord("fwtest", logging.DEBUG, __file__, 1, "mapped", (), None)
        record.view_mode = "scales"
        record.notes = frozenset({60})
        payload = json.loads(JsonFormatter(env="test").format(record))
        assert payload["env"] == "test"
        assert payload["view_mode"] == "scales"
        assert payload["notes"] == "frozenset({60})"

    def test_setup_logging_level(self, monkeypatch):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        try:
            monkeypatch.setenv("FW_LOG_LEVEL", "DEBUG")
            setup_logging()
            assert root.level == logging.DEBUG
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
            setup_logging("WARNING")
            assert root.level == logging.WARNING
        finally:
            root.handlers[:] = handlers
            root.setLevel(level)
        assert get_logger("fwinstrument").name == "fwinstrument"

    def test_tracing_disabled_without_endpoint(self, monkeypatch):
        monkeypatch.delenv("FW_OTEL_ENDPOINT", raising=False)
        assert setup_tracing() is False
