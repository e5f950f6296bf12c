"""Configuration-based service setup."""

from __future__ import annotations

import logging
import os
from typing import Any

import yaml

from .adapters.anthropic import AnthropicAdapter
from .adapters.connection_pool import HTTPConnectionPool
from .adapters.mock import MockInferenceService
from .adapters.openai_compatible import OpenAICompatibleAdapter
from .retry import RetryPolicy
from .router import InferenceRouter
from .service import InferenceService
from .settings import InferenceSettings
from .telemetry import TelemetryConfig, configure_telemetry, instrument_httpx

logger = logging.getLogger(__name__)


def build_service(
    settings: InferenceSettings,
    connection_pool: HTTPConnectionPool | None = None,
) -> InferenceService:
    """Create the adapter selected by ``settings.provider``."""
    if settings.provider == "mock":
        return MockInferenceService()

    adapter_cls = (
        AnthropicAdapter if settings.provider == "anthropic" else OpenAICompatibleAdapter
    )
    return adapter_cls(
        api_key=settings.api_key,
        base_url=settings.base_url,
        default_model=settings.model_name,
        connection_pool=connection_pool,
        timeout=settings.request_timeout_s,
        health_timeout=settings.health_timeout_s,
        retry_policy=RetryPolicy(max_retries=settings.max_retries),
    )


def setup_telemetry(settings: InferenceSettings) -> bool:
    """Configure Logfire from settings and instrument HTTPX."""
    configured = configure_telemetry(
        TelemetryConfig(
            enabled=settings.telemetry_enabled,
            service_name=settings.telemetry_service_name,
            environment=settings.telemetry_environment,
            logfire_token=settings.logfire_token,
            send_to_logfire=settings.logfire_send_to_cloud,
        )
    )
    if configured:
        instrument_httpx()
    return configured


def setup_router_from_config(
    config_path: str = "inference.yaml",
    connection_pool: HTTPConnectionPool | None = None,
) -> InferenceRouter:
    """Set up an inference router from a YAML file with BYOK support.

    Services whose ``requires_key`` environment variable is unset are skipped.
    A missing file gives a router with only the mock service.

    Example config:
    ```yaml
    services:
      - name: mock
        type: mock

      - name: gpt4o
        type: openai-compatible
        model: gpt-4o
        requires_key: OPENAI_API_KEY

      - name: groq
        type: openai-compatible
        base_url: https://api.groq.com/openai/v1
        model: llama3-70b-8192
        requires_key: GROQ_API_KEY

      - name: claude
        type: anthropic
        model: claude-3-5-sonnet-20241022
        requires_key: ANTHROPIC_API_KEY
        max_retries: 3

    default: gpt4o
    fallback: mock
    ```
    """
    router = InferenceRouter()

    if not os.path.exists(config_path):
        logger.info("No inference config at %s, using mock only", config_path)
        return router

    with open(config_path) as f:
        config = yaml.safe_load(f) or {}

    pool = connection_pool or HTTPConnectionPool()
    for service_config in config.get("services", []):
        name = service_config["name"]
        service = _build_from_entry(service_config, pool)
        if service is None:
            continue
        router.register(name, service)

    candidates = (
        config.get("default"),
        config.get("fallback"),
        router.default_service,
        "mock",
    )
    for candidate in candidates:
        if candidate in router.services:
            router.default_service = candidate
            break
    else:
        logger.warning("No usable default service in %s", config_path)

    return router


def _build_from_entry(
    entry: dict[str, Any], pool: HTTPConnectionPool
) -> InferenceService | None:
    service_type = entry.get("type", "mock")

    if service_type == "mock":
        return MockInferenceService(latency_ms=entry.get("latency_ms", 0))

    api_key = None
    if requires_key := entry.get("requires_key"):
        api_key = os.getenv(requires_key)
        if not api_key:
            logger.info("Skipping %s: %s is not set", entry["name"], requires_key)
            return None

    if service_type == "openai-compatible":
        adapter_cls: type[OpenAICompatibleAdapter] | type[AnthropicAdapter] = (
            OpenAICompatibleAdapter
        )
    elif service_type == "anthropic":
        adapter_cls = AnthropicAdapter
    else:
        logger.warning("Skipping %s: unknown type %r", entry["name"], service_type)
        return None

    return adapter_cls(
        api_key=api_key,
        base_url=entry.get("base_url"),
        default_model=entry.get("model"),
        models=entry.get("models"),
        connection_pool=pool,
        timeout=entry.get("timeout", 30.0),
        retry_policy=RetryPolicy(max_retries=entry.get("max_retries", 2)),
        context_window=entry.get("context_window"),
        max_output_tokens=entry.get("max_output_tokens"),
    )
