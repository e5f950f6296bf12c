"""Provider-agnostic, template-based LLM inference."""

from .adapters import (
    AnthropicAdapter,
    HTTPConnectionPool,
    MockInferenceService,
    OpenAICompatibleAdapter,
)
from .errors import (
    BackendError,
    BackendUnavailable,
    ErrorKind,
    InferenceError,
    InvalidRequest,
    MalformedResponse,
    TokenCountError,
)
from .normalize import normalize_content
from .retry import RetryPolicy
from .router import InferenceRouter
from .service import InferenceService
from .settings import InferenceSettings
from .template import find_placeholders, render_template
from .tokens import estimate_tokens
from .types import (
    HealthCheckResult,
    HealthStatus,
    InferenceRequest,
    InferenceResponse,
    ModelType,
    ResponseMetadata,
    TokenUsage,
)

__all__ = [
    "AnthropicAdapter",
    "BackendError",
    "BackendUnavailable",
    "ErrorKind",
    "HTTPConnectionPool",
    "HealthCheckResult",
    "HealthStatus",
    "InferenceError",
    "InferenceRequest",
    "InferenceResponse",
    "InferenceRouter",
    "InferenceService",
    "InferenceSettings",
    "InvalidRequest",
    "MalformedResponse",
    "MockInferenceService",
    "ModelType",
    "OpenAICompatibleAdapter",
    "ResponseMetadata",
    "RetryPolicy",
    "TokenCountError",
    "TokenUsage",
    "estimate_tokens",
    "find_placeholders",
    "normalize_content",
    "render_template",
]
