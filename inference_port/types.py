"""Request, response and health models for the inference contract."""

from __future__ import annotations

import math
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue, computed_field

from .errors import InvalidRequest, invalid_model_type
from .normalize import normalize_content
from .template import find_placeholders, render_template

MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ModelType(str, Enum):
    """Kind of work a request asks for; drives model selection."""

    CODING = "coding"
    REASONING = "reasoning"
    GENERAL = "general"
    FAST = "fast"
    CREATIVE = "creative"

    @classmethod
    def parse(cls, value: str | ModelType) -> ModelType:
        """Parse a model type name, case-insensitively.

        Raises:
            InvalidRequest: If the name is not a known model type.
        """
        if isinstance(value, ModelType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise invalid_model_type(str(value)) from None

    def optimal_openai_model(self) -> str:
        return _OPENAI_MODELS[self]

    def optimal_anthropic_model(self) -> str:
        return _ANTHROPIC_MODELS[self]

    def typical_max_tokens(self) -> int:
        return _TYPICAL_MAX_TOKENS[self]


_OPENAI_MODELS = {
    ModelType.CODING: "gpt-4o",
    ModelType.REASONING: "gpt-4o",
    ModelType.GENERAL: "gpt-4o-mini",
    ModelType.FAST: "gpt-3.5-turbo",
    ModelType.CREATIVE: "gpt-4o",
}

_ANTHROPIC_MODELS = {
    ModelType.CODING: "claude-3-5-sonnet-20241022",
    ModelType.REASONING: "claude-3-5-sonnet-20241022",
    ModelType.GENERAL: "claude-3-5-haiku-20241022",
    ModelType.FAST: "claude-3-5-haiku-20241022",
    ModelType.CREATIVE: "claude-3-5-sonnet-20241022",
}

_TYPICAL_MAX_TOKENS = {
    ModelType.CODING: 4096,
    ModelType.REASONING: 8192,
    ModelType.GENERAL: 2048,
    ModelType.FAST: 1024,
    ModelType.CREATIVE: 4096,
}


class InferenceRequest(BaseModel):
    """A prompt template plus generation options.

    Requests are immutable values. The ``with_*`` helpers return a new request
    and leave this one untouched.

    Examples:
        request = InferenceRequest(
            template="Write a {{language}} function that will {{task}}",
            parameters={"language": "Python", "task": "reverse a list"},
            model_type=ModelType.CODING,
        ).with_max_tokens(200).with_temperature(0.3)
    """

    model_config = ConfigDict(frozen=True)

    template: str
    parameters: dict[str, str] = Field(default_factory=dict)
    model_type: ModelType = ModelType.GENERAL
    model_override: str | None = None
    max_tokens: int | None = None
    temperature: float | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    def validate_request(self) -> None:
        """Check field constraints.

        Raises:
            InvalidRequest: If ``temperature`` is outside [0.0, 2.0] or
                ``max_tokens`` is not a positive integer.
        """
        if self.temperature is not None and not (
            math.isfinite(self.temperature)
            and MIN_TEMPERATURE <= self.temperature <= MAX_TEMPERATURE
        ):
            raise InvalidRequest(
                f"temperature must be between {MIN_TEMPERATURE} and "
                f"{MAX_TEMPERATURE}, got {self.temperature}",
                field="temperature",
            )
        if self.max_tokens is not None and self.max_tokens < 1:
            raise InvalidRequest(
                f"max_tokens must be a positive integer, got {self.max_tokens}",
                field="max_tokens",
            )

    def render(self) -> str:
        """Render the template with this request's parameters."""
        return render_template(self.template, self.parameters)

    def unresolved_placeholders(self) -> list[str]:
        """Placeholder names that have no matching parameter."""
        return [
            name
            for name in find_placeholders(self.template)
            if name not in self.parameters
        ]

    def with_parameter(self, name: str, value: str) -> InferenceRequest:
        return self.model_copy(update={"parameters": {**self.parameters, name: value}})

    def with_parameters(self, parameters: dict[str, str]) -> InferenceRequest:
        return self.model_copy(
            update={"parameters": {**self.parameters, **parameters}}
        )

    def with_model(self, model: str) -> InferenceRequest:
        return self.model_copy(update={"model_override": model})

    def with_max_tokens(self, max_tokens: int) -> InferenceRequest:
        updated = self.model_copy(update={"max_tokens": max_tokens})
        updated.validate_request()
        return updated

    def with_temperature(self, temperature: float) -> InferenceRequest:
        updated = self.model_copy(update={"temperature": float(temperature)})
        updated.validate_request()
        return updated

    def with_metadata(self, key: str, value: str) -> InferenceRequest:
        return self.model_copy(update={"metadata": {**self.metadata, key: value}})


class TokenUsage(BaseModel):
    """Token accounting for one inference call."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = Field(0, ge=0)
    completion_tokens: int = Field(0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class ResponseMetadata(BaseModel):
    """Usage and timing details attached to a response."""

    model_config = ConfigDict(frozen=True)

    model: str
    token_usage: TokenUsage
    processing_time_ms: int = Field(0, ge=0)
    extra: dict[str, JsonValue] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)

    def with_extra(self, key: str, value: JsonValue) -> ResponseMetadata:
        return self.model_copy(update={"extra": {**self.extra, key: value}})


class InferenceResponse(BaseModel):
    """Normalized output of a successful inference call."""

    model_config = ConfigDict(frozen=True)

    content: JsonValue
    metadata: ResponseMetadata

    @classmethod
    def from_text(
        cls,
        raw: str | None,
        model: str,
        token_usage: TokenUsage,
        processing_time_ms: int,
        extra: dict[str, Any] | None = None,
    ) -> InferenceResponse:
        """Build a response from raw backend text using JSON-first normalization.

        Raises:
            MalformedResponse: If ``raw`` is None.
        """
        return cls(
            content=normalize_content(raw),
            metadata=ResponseMetadata(
                model=model,
                token_usage=token_usage,
                processing_time_ms=processing_time_ms,
                extra=extra or {},
            ),
        )

    @classmethod
    def from_string(
        cls,
        text: str,
        model: str,
        token_usage: TokenUsage,
        processing_time_ms: int,
    ) -> InferenceResponse:
        """Build a response whose content is always the given text."""
        return cls(
            content=text,
            metadata=ResponseMetadata(
                model=model,
                token_usage=token_usage,
                processing_time_ms=processing_time_ms,
            ),
        )


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"

    def is_healthy(self) -> bool:
        return self is HealthStatus.HEALTHY


class HealthCheckResult(BaseModel):
    """Outcome of a backend health probe."""

    model_config = ConfigDict(frozen=True)

    status: HealthStatus
    details: dict[str, str] = Field(default_factory=dict)
    checked_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def healthy(cls, **details: str) -> HealthCheckResult:
        return cls(status=HealthStatus.HEALTHY, details=details)

    @classmethod
    def degraded(cls, reason: str, **details: str) -> HealthCheckResult:
        return cls(status=HealthStatus.DEGRADED, details={**details, "reason": reason})

    @classmethod
    def unhealthy(cls, reason: str, **details: str) -> HealthCheckResult:
        return cls(
            status=HealthStatus.UNHEALTHY, details={**details, "reason": reason}
        )
