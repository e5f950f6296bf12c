"""Telemetry and observability using Pydantic Logfire."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import logfire
from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Set once configure_telemetry() succeeds; until then spans are no-ops and
# log helpers go to the stdlib logger.
_configured = False


class TelemetryConfig(BaseModel):
    """Configuration for telemetry."""

    enabled: bool = True
    service_name: str = "inference-port"
    service_version: str = "0.1.0"
    environment: str = "development"
    logfire_token: str | None = None
    send_to_logfire: bool = False  # Set to True to send to Logfire cloud
    console: bool = False


def configure_telemetry(config: TelemetryConfig) -> bool:
    """Configure Logfire telemetry.

    Args:
        config: Telemetry configuration

    Returns:
        True if Logfire is now active
    """
    global _configured

    if not config.enabled:
        logger.info("Telemetry disabled")
        return False

    try:
        logfire.configure(
            service_name=config.service_name,
            service_version=config.service_version,
            environment=config.environment,
            token=config.logfire_token if config.send_to_logfire else None,
            send_to_logfire=config.send_to_logfire,
            console=(
                logfire.ConsoleOptions(
                    colors="auto",
                    verbose=config.environment == "development",
                )
                if config.console
                else False
            ),
        )
    except Exception as e:
        logger.error(f"Failed to configure Logfire: {e}")
        return False

    _configured = True
    logger.info(
        f"Logfire telemetry configured: service={config.service_name}, "
        f"env={config.environment}, cloud={'enabled' if config.send_to_logfire else 'disabled'}"
    )
    return True


def is_configured() -> bool:
    return _configured


def instrument_httpx() -> None:
    """Instrument HTTPX so backend API calls show up as spans.

    Call after configure_telemetry().
    """
    if not _configured:
        return

    try:
        logfire.instrument_httpx()
        logger.debug("Logfire instrumentation enabled for HTTPX")
    except Exception as e:
        logger.warning(f"Could not instrument HTTPX: {e}")


@contextmanager
def start_span(name: str, **attrs: Any) -> Iterator[None]:
    """Create a telemetry span for tracing operations.

    Args:
        name: Span name
        **attrs: Additional span attributes
    """
    if not _configured:
        yield
        return

    with logfire.span(name, **attrs):
        yield


def log_info(message: str, **attrs: Any) -> None:
    """Log an info-level message with structured attributes."""
    if _configured:
        logfire.info(message, **attrs)
    else:
        logger.info(f"{message} {attrs}")


def log_warning(message: str, **attrs: Any) -> None:
    """Log a warning-level message with structured attributes."""
    if _configured:
        logfire.warn(message, **attrs)
    else:
        logger.warning(f"{message} {attrs}")


def log_error(message: str, **attrs: Any) -> None:
    """Log an error-level message with structured attributes."""
    if _configured:
        logfire.error(message, **attrs)
    else:
        logger.error(f"{message} {attrs}")
