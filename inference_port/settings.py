from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class InferenceSettings(BaseSettings):
    """Inference configuration, read from ``INFERENCE_*`` env vars or ``.env``."""

    provider: Literal["mock", "openai-compatible", "anthropic"] = "mock"
    model_name: str | None = None
    base_url: str | None = None
    api_key: str | None = None
    request_timeout_s: float = 30.0
    health_timeout_s: float = 5.0
    max_retries: int = 2
    config_path: str = "inference.yaml"

    # Telemetry settings (Logfire)
    telemetry_enabled: bool = True
    telemetry_service_name: str = "inference-port"
    telemetry_environment: str = "development"
    logfire_token: str | None = None
    logfire_send_to_cloud: bool = False

    model_config = SettingsConfigDict(
        env_prefix="INFERENCE_",
        env_parse_none_str="none",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
