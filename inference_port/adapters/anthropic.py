"""Anthropic Claude adapter for direct API access.

Anthropic uses a different API format than OpenAI, so it needs its own adapter:
- ``x-api-key`` instead of ``Authorization``
- ``/messages`` instead of ``/chat/completions``
- a required ``anthropic-version`` header
"""

from __future__ import annotations

import logging
from typing import Any

from ..types import InferenceRequest, ModelType
from .base import Completion, HTTPInferenceAdapter

logger = logging.getLogger(__name__)

# Anthropic accepts temperatures in [0, 1].
ANTHROPIC_MAX_TEMPERATURE = 1.0


class AnthropicAdapter(HTTPInferenceAdapter):
    """Adapter for Anthropic's Messages API.

    Examples:
        adapter = AnthropicAdapter(api_key=os.getenv("ANTHROPIC_API_KEY"))
        response = await adapter.infer(
            InferenceRequest(template="Summarize {{text}}", parameters={"text": doc})
        )
    """

    provider = "anthropic"
    default_base_url = "https://api.anthropic.com/v1"
    api_key_env = "ANTHROPIC_API_KEY"
    completion_path = "/messages"

    def __init__(
        self, *args: Any, anthropic_version: str = "2023-06-01", **kwargs: Any
    ):
        """Initialize the adapter.

        Args:
            anthropic_version: API version header value

        Remaining arguments are those of ``HTTPInferenceAdapter``.
        """
        super().__init__(*args, **kwargs)
        self.anthropic_version = anthropic_version

    def preferred_model(self, model_type: ModelType) -> str:
        return model_type.optimal_anthropic_model()

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key or "",
            "anthropic-version": self.anthropic_version,
            "content-type": "application/json",
        }

    def _build_payload(
        self, prompt: str, model: str, request: InferenceRequest
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": request.max_tokens
            or request.model_type.typical_max_tokens(),
        }
        if request.temperature is not None:
            temperature = min(request.temperature, ANTHROPIC_MAX_TEMPERATURE)
            if temperature != request.temperature:
                logger.debug(
                    "Clamped temperature %s to %s for Anthropic",
                    request.temperature,
                    temperature,
                )
            payload["temperature"] = temperature
        return payload

    def _parse_completion(self, data: dict[str, Any]) -> Completion:
        blocks = [
            block.get("text", "")
            for block in data["content"]
            if block.get("type") == "text"
        ]
        usage = data.get("usage") or {}
        return Completion(
            text="".join(blocks) if blocks else None,
            model=data.get("model"),
            prompt_tokens=usage.get("input_tokens"),
            completion_tokens=usage.get("output_tokens"),
        )
