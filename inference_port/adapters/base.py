"""Shared implementation for JSON-over-HTTP inference backends."""

from __future__ import annotations

import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

import httpx
from pydantic import ValidationError

from ..errors import (
    BackendUnavailable,
    InferenceError,
    MalformedResponse,
    TokenCountError,
    context_window_exceeded,
    generation_failed,
    invalid_api_key,
    rate_limit_exceeded,
    token_limit_exceeded,
)
from ..retry import RetryPolicy
from ..telemetry import log_error, log_info, log_warning, start_span
from ..tokens import estimate_tokens
from ..types import (
    HealthCheckResult,
    InferenceRequest,
    InferenceResponse,
    ModelType,
    TokenUsage,
)
from .connection_pool import HTTPConnectionPool

# Statuses that mean the backend (or a gateway in front of it) could not
# serve the request right now. 529 is Anthropic's "overloaded".
UNAVAILABLE_STATUSES = frozenset({408, 502, 503, 504, 529})


@dataclass(frozen=True)
class Completion:
    """Provider-neutral view of one completion."""

    text: str | None
    model: str | None = None
    prompt_tokens: int | None = None
    completion_tokens: int | None = None


class HTTPInferenceAdapter(ABC):
    """Base class for adapters that talk to a JSON HTTP API.

    Subclasses describe the provider's wire format; this class handles model
    selection, request limits, retries, error mapping, normalization, timing
    and logging.
    """

    provider: ClassVar[str]
    default_base_url: ClassVar[str]
    api_key_env: ClassVar[str]
    completion_path: ClassVar[str]
    health_path: ClassVar[str] = "/models"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str | None = None,
        models: list[str] | None = None,
        connection_pool: HTTPConnectionPool | None = None,
        timeout: float = 30.0,
        health_timeout: float = 5.0,
        degraded_after_ms: float = 2000.0,
        retry_policy: RetryPolicy | None = None,
        context_window: int | None = None,
        max_output_tokens: int | None = None,
    ):
        """Initialize the adapter.

        Args:
            api_key: API key; falls back to the provider's environment variable
            base_url: API root, e.g. "https://api.openai.com/v1"
            default_model: Model used when a request has no override
            models: Models reported by supported_models(); defaults to the
                provider's ModelType preferences
            connection_pool: Shared pool; a private one is created if omitted
            timeout: Per-request timeout in seconds
            health_timeout: Timeout for the health probe in seconds
            degraded_after_ms: Probe latency above which health is "degraded"
            retry_policy: Retry policy for transient failures
            context_window: Optional limit on estimated prompt tokens
            max_output_tokens: Optional limit on a request's max_tokens
        """
        self.api_key = api_key or os.getenv(self.api_key_env)
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.default_model = default_model
        self.pool = connection_pool or HTTPConnectionPool(timeout=timeout)
        self.timeout = timeout
        self.health_timeout = health_timeout
        self.degraded_after_ms = degraded_after_ms
        self.retry_policy = retry_policy or RetryPolicy()
        self.context_window = context_window
        self.max_output_tokens = max_output_tokens
        self._models = tuple(models) if models else self._default_models()

    # -- provider hooks --------------------------------------------------

    @abstractmethod
    def preferred_model(self, model_type: ModelType) -> str:
        """Model this provider prefers for ``model_type``."""

    @abstractmethod
    def _headers(self) -> dict[str, str]: ...

    @abstractmethod
    def _build_payload(
        self, prompt: str, model: str, request: InferenceRequest
    ) -> dict[str, Any]: ...

    @abstractmethod
    def _parse_completion(self, data: dict[str, Any]) -> Completion: ...

    # -- contract ----------------------------------------------------------

    def select_model(self, request: InferenceRequest) -> str:
        return (
            request.model_override
            or self.default_model
            or self.preferred_model(request.model_type)
        )

    async def infer(self, request: InferenceRequest) -> InferenceResponse:
        request.validate_request()
        if not self.api_key:
            raise invalid_api_key(self.provider)

        model = self.select_model(request)
        prompt = request.render()
        if unresolved := request.unresolved_placeholders():
            log_warning(
                "Unresolved template placeholders",
                provider=self.provider,
                placeholders=unresolved,
            )
        prompt_estimate = self._check_limits(prompt, request)

        with start_span("inference.infer", adapter=self.provider, model=model):
            start = time.perf_counter()
            try:
                completion = await self.retry_policy.execute(
                    self._complete, prompt, model, request
                )
                elapsed_ms = int((time.perf_counter() - start) * 1000)
                response = InferenceResponse.from_text(
                    completion.text,
                    model=completion.model or model,
                    token_usage=self._token_usage(completion, prompt_estimate),
                    processing_time_ms=elapsed_ms,
                    extra={
                        **request.metadata,
                        "adapter": self.provider,
                        "requested_model": model,
                    },
                )
            except InferenceError as e:
                log_error(
                    "Inference failed",
                    provider=self.provider,
                    model=model,
                    kind=e.kind.value,
                    error=e.message,
                )
                raise

        usage = response.metadata.token_usage
        log_info(
            "Inference completed",
            provider=self.provider,
            model=response.metadata.model,
            total_tokens=usage.total_tokens,
            processing_time_ms=response.metadata.processing_time_ms,
        )
        return response

    async def health_check(self) -> HealthCheckResult:
        details = {"provider": self.provider, "base_url": self.base_url}
        if not self.api_key:
            return HealthCheckResult.unhealthy("API key not configured", **details)

        start = time.perf_counter()
        try:
            response = await self.pool.get(
                f"{self.base_url}{self.health_path}",
                headers=self._headers(),
                timeout=self.health_timeout,
            )
        except httpx.TimeoutException:
            return HealthCheckResult.unhealthy("Health probe timed out", **details)
        except httpx.HTTPError as e:
            return HealthCheckResult.unhealthy(f"Could not reach backend: {e}", **details)

        elapsed_ms = (time.perf_counter() - start) * 1000
        details["latency_ms"] = str(int(elapsed_ms))

        if not response.is_success:
            return HealthCheckResult.unhealthy(
                f"Health probe returned {response.status_code}", **details
            )
        if elapsed_ms > self.degraded_after_ms:
            return HealthCheckResult.degraded("Slow health probe response", **details)
        return HealthCheckResult.healthy(**details)

    def supported_models(self) -> list[str]:
        return list(self._models)

    def count_tokens(self, text: str) -> int:
        if not isinstance(text, str):
            raise TokenCountError(
                f"Cannot count tokens for {type(text).__name__}", field="text"
            )
        return estimate_tokens(text)

    async def close(self) -> None:
        await self.pool.close()

    # -- internals ---------------------------------------------------------

    def _default_models(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(self.preferred_model(t) for t in ModelType))

    def _check_limits(self, prompt: str, request: InferenceRequest) -> int:
        prompt_tokens = self.count_tokens(prompt)
        if self.context_window is not None and prompt_tokens > self.context_window:
            raise context_window_exceeded(self.context_window, prompt_tokens)
        if (
            self.max_output_tokens is not None
            and request.max_tokens is not None
            and request.max_tokens > self.max_output_tokens
        ):
            raise token_limit_exceeded(self.max_output_tokens, request.max_tokens)
        return prompt_tokens

    async def _complete(
        self, prompt: str, model: str, request: InferenceRequest
    ) -> Completion:
        try:
            response = await self.pool.post(
                f"{self.base_url}{self.completion_path}",
                headers=self._headers(),
                json=self._build_payload(prompt, model, request),
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise BackendUnavailable(
                f"Request to {self.provider} timed out for {model}"
            ) from e
        except httpx.TransportError as e:
            raise BackendUnavailable(f"Could not reach {self.provider}: {e}") from e
        except httpx.HTTPError as e:
            raise generation_failed(f"{self.provider} request failed: {e}") from e

        self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse(
                f"{self.provider} returned a body that is not JSON"
            ) from e

        try:
            return self._parse_completion(data)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise MalformedResponse(
                f"Unexpected {self.provider} response shape: {e!r}"
            ) from e

    def _token_usage(self, completion: Completion, prompt_estimate: int) -> TokenUsage:
        """Usage reported by the backend, estimated where it is missing.

        Raises:
            MalformedResponse: If the reported counts are not non-negative ints.
        """
        try:
            return TokenUsage(
                prompt_tokens=(
                    completion.prompt_tokens
                    if completion.prompt_tokens is not None
                    else prompt_estimate
                ),
                completion_tokens=(
                    completion.completion_tokens
                    if completion.completion_tokens is not None
                    else estimate_tokens(completion.text or "")
                ),
            )
        except ValidationError as e:
            raise MalformedResponse(
                f"{self.provider} returned invalid token usage"
            ) from e

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if response.is_success:
            return

        detail = _error_detail(response)
        if status in UNAVAILABLE_STATUSES:
            raise BackendUnavailable(
                f"{self.provider} unavailable ({status}): {detail}",
                status_code=status,
            )
        if status == 429:
            raise rate_limit_exceeded(self.provider)
        if status in (401, 403):
            raise invalid_api_key(self.provider, status_code=status)
        raise generation_failed(
            f"{self.provider} API error ({status}): {detail}", status_code=status
        )


def _error_detail(response: httpx.Response) -> str:
    try:
        error = response.json().get("error", {})
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    except (ValueError, AttributeError):
        pass
    return response.text[:200]
