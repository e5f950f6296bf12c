"""Tests for settings, configuration validation and router setup."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from inference_port import (
    AnthropicAdapter,
    InferenceRequest,
    InferenceSettings,
    MockInferenceService,
    OpenAICompatibleAdapter,
)
from inference_port.config import (
    build_service,
    setup_router_from_config,
    setup_telemetry,
)
from inference_port.config_validator import ConfigurationError, validate_settings

CONFIG = """
services:
  - name: mock
    type: mock
    latency_ms: 5

  - name: gpt4o
    type: openai-compatible
    model: gpt-4o
    requires_key: TEST_OPENAI_KEY

  - name: groq
    type: openai-compatible
    base_url: https://api.groq.com/openai/v1
    model: llama3-70b-8192
    models: [llama3-70b-8192, llama3-8b-8192]
    requires_key: TEST_GROQ_KEY

  - name: claude
    type: anthropic
    model: claude-3-5-sonnet-20241022
    requires_key: TEST_ANTHROPIC_KEY
    max_retries: 3
    context_window: 200000

  - name: mystery
    type: carrier-pigeon

default: claude
fallback: mock
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "inference.yaml"
    path.write_text(CONFIG)
    return str(path)


class TestSettings:
    """Tests for InferenceSettings."""

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            settings = InferenceSettings(_env_file=None)

        assert settings.provider == "mock"
        assert settings.api_key is None
        assert settings.request_timeout_s == 30.0
        assert settings.max_retries == 2

    def test_from_environment(self):
        with patch.dict(
            "os.environ",
            {
                "INFERENCE_PROVIDER": "anthropic",
                "INFERENCE_API_KEY": "sk-ant-test",
                "INFERENCE_MODEL_NAME": "claude-3-5-haiku-20241022",
                "INFERENCE_MAX_RETRIES": "4",
            },
            clear=True,
        ):
            settings = InferenceSettings(_env_file=None)

        assert settings.provider == "anthropic"
        assert settings.api_key == "sk-ant-test"
        assert settings.model_name == "claude-3-5-haiku-20241022"
        assert settings.max_retries == 4


class TestValidateSettings:
    """Tests for validate_settings."""

    def test_mock_needs_nothing(self):
        validate_settings(InferenceSettings(_env_file=None, provider="mock"))

    def test_missing_api_key(self):
        settings = InferenceSettings(
            _env_file=None, provider="openai-compatible", api_key=None
        )

        with pytest.raises(ConfigurationError) as exc_info:
            validate_settings(settings)

        assert "API_KEY must be set for provider 'openai-compatible'" in str(
            exc_info.value
        )

    def test_collects_all_errors(self):
        settings = InferenceSettings(
            _env_file=None,
            provider="mock",
            request_timeout_s=0,
            health_timeout_s=-1,
            max_retries=-1,
            telemetry_enabled=True,
            logfire_send_to_cloud=True,
            logfire_token=None,
        )

        with pytest.raises(ConfigurationError) as exc_info:
            validate_settings(settings)

        message = str(exc_info.value)
        assert message.startswith("Configuration validation failed:")
        assert "REQUEST_TIMEOUT_S must be > 0" in message
        assert "HEALTH_TIMEOUT_S must be > 0" in message
        assert "MAX_RETRIES must be >= 0" in message
        assert "LOGFIRE_TOKEN must be set" in message


class TestBuildService:
    """Tests for build_service."""

    def test_mock(self):
        service = build_service(InferenceSettings(_env_file=None))
        assert isinstance(service, MockInferenceService)

    def test_openai_compatible(self):
        settings = InferenceSettings(
            _env_file=None,
            provider="openai-compatible",
            api_key="gsk-test",
            base_url="https://api.groq.com/openai/v1/",
            model_name="llama3-70b-8192",
            max_retries=5,
        )

        service = build_service(settings)

        assert isinstance(service, OpenAICompatibleAdapter)
        assert service.base_url == "https://api.groq.com/openai/v1"
        assert service.default_model == "llama3-70b-8192"
        assert service.retry_policy.max_retries == 5

    def test_anthropic(self):
        settings = InferenceSettings(
            _env_file=None, provider="anthropic", api_key="sk-ant-test"
        )

        service = build_service(settings)

        assert isinstance(service, AnthropicAdapter)
        assert service.api_key == "sk-ant-test"


class TestSetupTelemetry:
    """Tests for setup_telemetry."""

    @patch("inference_port.config.instrument_httpx")
    @patch("inference_port.config.configure_telemetry", return_value=True)
    def test_instruments_httpx_when_configured(self, mock_configure, mock_instrument):
        settings = InferenceSettings(_env_file=None, telemetry_environment="staging")

        assert setup_telemetry(settings) is True

        config = mock_configure.call_args[0][0]
        assert config.environment == "staging"
        mock_instrument.assert_called_once()

    @patch("inference_port.config.instrument_httpx")
    @patch("inference_port.config.configure_telemetry", return_value=False)
    def test_skips_instrumentation_when_disabled(self, mock_configure, mock_instrument):
        settings = InferenceSettings(_env_file=None, telemetry_enabled=False)

        assert setup_telemetry(settings) is False
        mock_instrument.assert_not_called()


class TestSetupRouterFromConfig:
    """Tests for setup_router_from_config."""

    def test_missing_file_gives_mock_only(self, tmp_path):
        router = setup_router_from_config(str(tmp_path / "absent.yaml"))

        assert router.list_services() == ["mock"]
        assert router.default_service == "mock"

    def test_byok_skips_services_without_keys(self, config_file, monkeypatch):
        monkeypatch.setenv("TEST_OPENAI_KEY", "sk-test")
        monkeypatch.delenv("TEST_GROQ_KEY", raising=False)
        monkeypatch.delenv("TEST_ANTHROPIC_KEY", raising=False)

        router = setup_router_from_config(config_file)

        assert router.list_services() == ["mock", "gpt4o"]
        # "claude" is not available, so the fallback applies
        assert router.default_service == "mock"
        assert router.get("gpt4o").api_key == "sk-test"
        assert router.get("mock").latency_ms == 5

    def test_all_keys_present(self, config_file, monkeypatch):
        monkeypatch.setenv("TEST_OPENAI_KEY", "sk-test")
        monkeypatch.setenv("TEST_GROQ_KEY", "gsk-test")
        monkeypatch.setenv("TEST_ANTHROPIC_KEY", "sk-ant-test")

        router = setup_router_from_config(config_file)

        assert router.list_services() == ["mock", "gpt4o", "groq", "claude"]
        assert router.default_service == "claude"

        groq = router.get("groq")
        assert groq.base_url == "https://api.groq.com/openai/v1"
        assert groq.supported_models() == ["llama3-70b-8192", "llama3-8b-8192"]

        claude = router.get("claude")
        assert isinstance(claude, AnthropicAdapter)
        assert claude.retry_policy.max_retries == 3
        assert claude.context_window == 200000

    @pytest.mark.asyncio
    async def test_unavailable_fallback_uses_mock(self, tmp_path, monkeypatch):
        path = tmp_path / "inference.yaml"
        path.write_text(CONFIG.replace("fallback: mock", "fallback: groq"))
        for key in ("TEST_OPENAI_KEY", "TEST_GROQ_KEY", "TEST_ANTHROPIC_KEY"):
            monkeypatch.delenv(key, raising=False)

        router = setup_router_from_config(str(path))

        assert router.list_services() == ["mock"]
        assert router.default_service == "mock"
        response = await router.infer(InferenceRequest(template="Hi"))
        assert response.metadata.model == "mock-general"

    def test_without_default_keeps_first_real_service(self, tmp_path, monkeypatch):
        path = tmp_path / "inference.yaml"
        path.write_text(
            "services:\n"
            "  - name: gpt4o\n"
            "    type: openai-compatible\n"
            "    requires_key: TEST_OPENAI_KEY\n"
        )
        monkeypatch.setenv("TEST_OPENAI_KEY", "sk-test")

        router = setup_router_from_config(str(path))

        assert router.default_service == "gpt4o"

    def test_services_share_connection_pool(self, config_file, monkeypatch):
        monkeypatch.setenv("TEST_OPENAI_KEY", "sk-test")
        monkeypatch.setenv("TEST_ANTHROPIC_KEY", "sk-ant-test")
        monkeypatch.delenv("TEST_GROQ_KEY", raising=False)

        router = setup_router_from_config(config_file)

        assert router.get("gpt4o").pool is router.get("claude").pool
