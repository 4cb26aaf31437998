"""
Unit tests for payload builders, the request model and settings.
"""

import logging
import re

import pytest

from ezgif_api.config import ConvertAction, Settings, VALID_ACTIONS
from ezgif_api.models import ConvertRequest, is_present
from ezgif_api.responses import (
    CANNED_RESPONSE_BUILDERS,
    build_convert_response,
    build_status_payload,
    iso_timestamp,
)
from ezgif_api.utils.error_handling import internal_error_detail
from ezgif_api.utils.http_client import RequestResult
from ezgif_api.utils.logging_config import (
    LOG_FORMATS,
    SERVICE_LOGGER,
    configure_logging,
    get_logger,
    resolve_format,
    resolve_level,
)


class TestStatusPayload:

    def test_reachable_payload(self):
        result = RequestResult.ok(status=200, headers={}, data="abcdef")
        payload = build_status_payload(result, "https://ezgif.com")
        assert payload["reachable"] is True
        assert payload["statusCode"] == 200
        assert payload["responseSize"] == 6
        assert set(payload) == {"service", "website", "reachable", "statusCode", "timestamp", "responseSize"}

    def test_response_size_counts_code_points(self):
        result = RequestResult.ok(status=200, headers={}, data="gif \U0001F600")
        assert build_status_payload(result, "https://ezgif.com")["responseSize"] == 5

    def test_unreachable_payload(self):
        payload = build_status_payload(RequestResult.failure("Request timeout"), "https://ezgif.com")
        assert payload["reachable"] is False
        assert payload["error"] == "Request timeout"
        assert set(payload) == {"service", "website", "reachable", "error", "timestamp"}


class TestConvertPayload:

    def test_canned_actions(self):
        assert set(CANNED_RESPONSE_BUILDERS) == {
            ConvertAction.GIF_TO_MP4,
            ConvertAction.VIDEO_TO_GIF,
            ConvertAction.RESIZE,
            ConvertAction.OPTIMIZE,
        }

    def test_canned_payload_keys_order(self):
        payload = build_convert_response(ConvertAction.GIF_TO_MP4, ConvertRequest(action="gif-to-mp4", url="u"))
        assert list(payload) == ["success", "action", "input", "output", "duration", "size", "status"]

    def test_output_is_time_based(self, monkeypatch):
        monkeypatch.setattr("ezgif_api.responses.time.time", lambda: 1700000000.5)
        payload = build_convert_response(ConvertAction.OPTIMIZE, ConvertRequest(action="optimize", url="u"))
        assert payload["output"] == "https://ezgif.com/output/1700000000500.gif"

    def test_acknowledgment_payload(self):
        payload = build_convert_response(ConvertAction.SPEED, ConvertRequest(action="speed", file="blob"))
        assert payload["status"] == "processing"
        assert payload["message"] == "Conversion request received"


class TestConvertRequest:

    def test_from_payload(self):
        request = ConvertRequest.from_payload({"action": "crop", "url": "https://x", "options": {"w": 10}})
        assert request.action == "crop"
        assert request.has_source
        assert request.input_reference == "https://x"
        assert request.options == {"w": 10}

    @pytest.mark.parametrize("payload", [None, [], "resize", 7])
    def test_non_mapping_payload(self, payload):
        request = ConvertRequest.from_payload(payload)
        assert request.action is None
        assert not request.has_source
        assert request.options == {}

    def test_file_only_input_reference(self):
        request = ConvertRequest.from_payload({"action": "resize", "file": {"name": "a.gif"}})
        assert request.input_reference == "file_uploaded"

    @pytest.mark.parametrize("value", [None, "", 0, 0.0, False])
    def test_absent_values(self, value):
        assert not is_present(value)

    @pytest.mark.parametrize("value", [{}, [], "0", 1, True, {"name": "a.gif"}])
    def test_present_values(self, value):
        assert is_present(value)

    def test_empty_file_object_is_a_source(self):
        request = ConvertRequest.from_payload({"action": "resize", "file": {}})
        assert request.has_source
        assert request.input_reference == "file_uploaded"

    def test_empty_url_falls_back_to_file(self):
        request = ConvertRequest.from_payload({"action": "resize", "url": "", "file": []})
        assert request.has_source
        assert request.input_reference == "file_uploaded"

    def test_extra_fields_ignored(self):
        request = ConvertRequest.from_payload({"action": "crop", "url": "u", "priority": "high"})
        assert not hasattr(request, "priority")


class TestSettingsAndHelpers:

    def test_defaults_from_env(self, monkeypatch):
        for name in ("HOST", "PORT", "EZGIF_API_ENV", "EZGIF_API_TARGET_URL",
                     "EZGIF_API_HTTP_TIMEOUT", "EZGIF_API_CORS_ORIGINS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()
        assert settings.port == 3000
        assert settings.http_timeout == 10.0
        assert settings.target_website == "https://ezgif.com"
        assert settings.cors_origins == ["*"]
        assert settings.is_production is False

    def test_overrides_from_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("EZGIF_API_ENV", "Production")
        monkeypatch.setenv("EZGIF_API_HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("EZGIF_API_CORS_ORIGINS", "http://a.test, http://b.test")

        settings = Settings.from_env()
        assert settings.port == 8080
        assert settings.is_production is True
        assert settings.http_timeout == 2.5
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_invalid_port_rejected(self, monkeypatch):
        monkeypatch.setenv("PORT", "eighty")
        with pytest.raises(ValueError):
            Settings.from_env()

    def test_valid_actions(self):
        assert len(VALID_ACTIONS) == 8

    def test_internal_error_detail(self):
        error = ValueError("boom")
        assert internal_error_detail(error, production=False) == "boom"
        assert internal_error_detail(error, production=True) == "Something went wrong"

    def test_iso_timestamp_format(self):
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", iso_timestamp())


class TestLoggingConfig:

    @pytest.fixture(autouse=True)
    def restore_service_logger(self):
        service_logger = logging.getLogger(SERVICE_LOGGER)
        handlers, level = service_logger.handlers[:], service_logger.level
        yield
        for handler in service_logger.handlers[:]:
            service_logger.removeHandler(handler)
            handler.close()
        for handler in handlers:
            service_logger.addHandler(handler)
        service_logger.setLevel(level)

    def test_level_names(self):
        assert resolve_level("warn") == logging.WARNING
        assert resolve_level("DEBUG") == logging.DEBUG
        assert resolve_level("bogus") == logging.INFO

    def test_default_level_under_pytest(self):
        assert resolve_level(None) == logging.WARNING

    def test_format_selection(self):
        assert resolve_format("json") == LOG_FORMATS["json"]
        assert resolve_format("development") == LOG_FORMATS["dev"]
        assert resolve_format("fancy") == LOG_FORMATS["standard"]

    def test_reconfigure_replaces_handlers(self):
        configure_logging(Settings(log_level="debug"))
        service_logger = configure_logging(Settings(log_level="error"))
        assert len(service_logger.handlers) == 1
        assert service_logger.level == logging.ERROR

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "ezgif_api.log"
        service_logger = configure_logging(Settings(log_level="info", log_file=str(log_file)))

        get_logger("tests").info("written to file")
        for handler in service_logger.handlers:
            handler.flush()

        assert len(service_logger.handlers) == 2
        assert "written to file" in log_file.read_text()

    def test_log_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("EZGIF_API_LOG_LEVEL", "debug")
        monkeypatch.setenv("EZGIF_API_LOG_FORMAT", "json")
        monkeypatch.delenv("EZGIF_API_LOG_FILE", raising=False)

        settings = Settings.from_env()
        assert settings.log_level == "debug"
        assert settings.log_format == "json"
        assert settings.log_file is None

    def test_loggers_nest_under_service(self):
        assert get_logger("app").name == "ezgif_api.app"
        assert get_logger("ezgif_api.router").name == "ezgif_api.router"
