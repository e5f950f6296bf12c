"""Inference service interface."""

from typing import Protocol, runtime_checkable

from .types import HealthCheckResult, InferenceRequest, InferenceResponse


@runtime_checkable
class InferenceService(Protocol):
    """Capability set every backend adapter provides.

    Failures are raised as ``InferenceError`` subclasses; nothing else escapes
    from backend I/O.
    """

    async def infer(self, request: InferenceRequest) -> InferenceResponse:
        """Render the template, generate, and normalize the output."""
        ...

    async def health_check(self) -> HealthCheckResult:
        """Report backend reachability within the adapter's timeout."""
        ...

    def supported_models(self) -> list[str]:
        """Model identifiers this adapter can serve, in a stable order."""
        ...

    def count_tokens(self, text: str) -> int:
        """Count (or estimate) tokens in ``text`` deterministically."""
        ...
