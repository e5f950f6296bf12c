"""Mock inference service for testing."""

from __future__ import annotations

import asyncio
import json
import time
from typing import Any

from ..errors import TokenCountError
from ..telemetry import start_span
from ..tokens import estimate_tokens
from ..types import (
    HealthCheckResult,
    InferenceRequest,
    InferenceResponse,
    ModelType,
    TokenUsage,
)

MOCK_MODELS = [
    "mock-general",
    "mock-coding",
    "mock-fast",
    "mock-creative",
    "mock-reasoning",
]


class MockInferenceService:
    """Deterministic, non-networked inference service.

    Fabricates a structured JSON payload per model type and runs it through
    the same normalization real adapters use, so it doubles as a runnable
    example of the response shape.

    Examples:
        service = MockInferenceService().with_latency(10)
        response = await service.infer(
            InferenceRequest(template="Hello {{name}}!", parameters={"name": "Ada"})
        )
        response.content["message"]
    """

    def __init__(
        self,
        latency_ms: int = 0,
        health_check_fails: bool = False,
        custom_response: str | None = None,
    ):
        self.latency_ms = latency_ms
        self.health_check_fails = health_check_fails
        self.custom_response = custom_response

    def with_latency(self, latency_ms: int) -> MockInferenceService:
        return MockInferenceService(
            latency_ms, self.health_check_fails, self.custom_response
        )

    def with_health_failure(self) -> MockInferenceService:
        return MockInferenceService(self.latency_ms, True, self.custom_response)

    def with_custom_response(self, raw: str) -> MockInferenceService:
        """Return ``raw`` (normalized) instead of the fabricated payload."""
        return MockInferenceService(self.latency_ms, self.health_check_fails, raw)

    async def infer(self, request: InferenceRequest) -> InferenceResponse:
        request.validate_request()

        with start_span(
            "inference.infer", adapter="mock", model_type=request.model_type.value
        ):
            start = time.perf_counter()
            if self.latency_ms > 0:
                await asyncio.sleep(self.latency_ms / 1000)

            prompt = request.render()
            raw = self.custom_response
            if raw is None:
                raw = json.dumps(_fabricate_payload(request.model_type, prompt))
            elapsed_ms = int((time.perf_counter() - start) * 1000)

        return InferenceResponse.from_text(
            raw,
            model=request.model_override or f"mock-{request.model_type.value}",
            token_usage=TokenUsage(
                prompt_tokens=estimate_tokens(prompt),
                completion_tokens=estimate_tokens(raw),
            ),
            processing_time_ms=elapsed_ms,
            extra={"adapter": "mock", "model_type": request.model_type.value},
        )

    async def health_check(self) -> HealthCheckResult:
        if self.health_check_fails:
            return HealthCheckResult.unhealthy(
                "Mock service intentionally failing", service="mock"
            )
        return HealthCheckResult.healthy(
            service="mock", latency_ms=str(self.latency_ms)
        )

    def supported_models(self) -> list[str]:
        return list(MOCK_MODELS)

    def count_tokens(self, text: str) -> int:
        if not isinstance(text, str):
            raise TokenCountError(
                f"Cannot count tokens for {type(text).__name__}", field="text"
            )
        return estimate_tokens(text)


def _fabricate_payload(model_type: ModelType, prompt: str) -> dict[str, Any]:
    if model_type is ModelType.CODING:
        return {
            "code": (
                f"# Generated code for: {prompt}\n"
                "def main():\n"
                '    print("Hello from mock!")\n'
            ),
            "language": "python",
            "explanation": "A basic Python program generated from the template.",
        }
    if model_type is ModelType.REASONING:
        return {
            "analysis": f"After careful analysis of '{prompt}'...",
            "reasoning_steps": [
                "First, I analyzed the template and parameters",
                "Then, I considered the context and implications",
                "Finally, I formulated this structured response",
            ],
            "conclusion": "This is a mock reasoning response with detailed analysis.",
        }
    if model_type is ModelType.CREATIVE:
        return {
            "story": (
                f"Once upon a time, when prompted with '{prompt}', "
                "there was a magical response..."
            ),
            "genre": "fantasy",
            "mood": "whimsical",
        }
    if model_type is ModelType.FAST:
        return {
            "message": "Quick mock completion",
            "response": f"Quick response: {prompt}",
        }
    return {
        "message": f"Mock completion for: {prompt}",
        "response": f"This is a mock response to: {prompt}",
    }
