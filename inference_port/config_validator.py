"""Configuration validation.

Checks settings up front so a misconfigured service fails at startup with a
clear message instead of on the first request.
"""

import logging

from inference_port.settings import InferenceSettings

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


def validate_settings(settings: InferenceSettings) -> None:
    """Validate inference settings.

    Args:
        settings: Settings instance to validate

    Raises:
        ConfigurationError: If any validation check fails
    """
    errors: list[str] = []

    if settings.provider != "mock" and not settings.api_key:
        errors.append(f"API_KEY must be set for provider '{settings.provider}'")

    if settings.request_timeout_s <= 0:
        errors.append(
            f"REQUEST_TIMEOUT_S must be > 0, got {settings.request_timeout_s}"
        )

    if settings.health_timeout_s <= 0:
        errors.append(f"HEALTH_TIMEOUT_S must be > 0, got {settings.health_timeout_s}")

    if settings.max_retries < 0:
        errors.append(f"MAX_RETRIES must be >= 0, got {settings.max_retries}")

    if settings.telemetry_enabled:
        if settings.logfire_send_to_cloud and not settings.logfire_token:
            errors.append(
                "LOGFIRE_TOKEN must be set when LOGFIRE_SEND_TO_CLOUD is true"
            )

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(
            f"  - {error}" for error in errors
        )
        raise ConfigurationError(error_msg)

    logger.info("Configuration validation passed")
