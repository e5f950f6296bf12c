"""Error taxonomy for inference operations.

Every failure that crosses the service contract is an ``InferenceError``
subclass. Callers branch on ``kind`` (or the class) and on ``retryable`` to
decide between retrying and giving up, without looking at adapter internals.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Tag carried by every inference error."""

    INVALID_REQUEST = "invalid_request"
    BACKEND_UNAVAILABLE = "backend_unavailable"
    BACKEND_ERROR = "backend_error"
    MALFORMED_RESPONSE = "malformed_response"
    TOKEN_COUNT_ERROR = "token_count_error"


class InferenceError(Exception):
    """Base class for all contract errors."""

    kind: ErrorKind
    retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.status_code = status_code

    @property
    def cause(self) -> BaseException | None:
        """The underlying exception, if this error wraps one."""
        return self.__cause__

    def to_dict(self) -> dict[str, str | int | None]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "field": self.field,
            "status_code": self.status_code,
        }


class InvalidRequest(InferenceError):
    """A request field violates its constraint."""

    kind = ErrorKind.INVALID_REQUEST


class BackendUnavailable(InferenceError):
    """The backend could not be reached or timed out."""

    kind = ErrorKind.BACKEND_UNAVAILABLE
    retryable = True


class BackendError(InferenceError):
    """The backend answered but signaled failure."""

    kind = ErrorKind.BACKEND_ERROR


class MalformedResponse(InferenceError):
    """The backend answered without any usable content."""

    kind = ErrorKind.MALFORMED_RESPONSE


class TokenCountError(InferenceError):
    """The tokenizer could not process the given text."""

    kind = ErrorKind.TOKEN_COUNT_ERROR


# ---------------------------------
# Factory helpers
# ---------------------------------


def generation_failed(message: str, status_code: int | None = None) -> BackendError:
    return BackendError(
        f"Inference generation failed: {message}", status_code=status_code
    )


def invalid_model_type(model_type: str) -> InvalidRequest:
    return InvalidRequest(f"Invalid model type: {model_type}", field="model_type")


def token_limit_exceeded(limit: int, requested: int) -> InvalidRequest:
    return InvalidRequest(
        f"Token limit {limit} exceeded, requested {requested}", field="max_tokens"
    )


def rate_limit_exceeded(provider: str) -> BackendError:
    return BackendError(f"{provider} rate limit exceeded", status_code=429)


def invalid_api_key(provider: str, status_code: int | None = None) -> BackendError:
    return BackendError(f"Invalid API key for {provider}", status_code=status_code)


def context_window_exceeded(max_tokens: int, actual_tokens: int) -> InvalidRequest:
    return InvalidRequest(
        f"Context window {max_tokens} exceeded with {actual_tokens} tokens",
        field="template",
    )


def unsupported_model(model: str) -> InvalidRequest:
    return InvalidRequest(f"Unsupported model: {model}", field="model")


def template_processing_failed(message: str) -> InvalidRequest:
    return InvalidRequest(f"Template processing failed: {message}", field="template")
