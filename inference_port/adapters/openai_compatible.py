"""OpenAI-compatible adapter for any provider using the OpenAI API format.

This adapter works with:
- OpenAI (GPT-4o, GPT-3.5, etc.)
- Groq (Llama, Mixtral, etc.)
- OpenRouter
- Together AI
- Any other OpenAI-compatible API (vLLM, TGI, Ollama's /v1 endpoint)
"""

from __future__ import annotations

from typing import Any

from ..types import InferenceRequest, ModelType
from .base import Completion, HTTPInferenceAdapter

REASONING_MODEL_PREFIXES = ("gpt-5", "o1", "o3", "o4")


class OpenAICompatibleAdapter(HTTPInferenceAdapter):
    """Adapter for ``/chat/completions`` style APIs.

    Examples:
        # OpenAI
        adapter = OpenAICompatibleAdapter(api_key=os.getenv("OPENAI_API_KEY"))

        # Groq Llama
        adapter = OpenAICompatibleAdapter(
            base_url="https://api.groq.com/openai/v1",
            api_key=os.getenv("GROQ_API_KEY"),
            default_model="llama3-70b-8192",
        )
    """

    provider = "openai-compatible"
    default_base_url = "https://api.openai.com/v1"
    api_key_env = "OPENAI_API_KEY"
    completion_path = "/chat/completions"

    def __init__(self, *args: Any, json_mode: bool = False, **kwargs: Any):
        """Initialize the adapter.

        Args:
            json_mode: Ask the backend for a JSON object response
                (``response_format={"type": "json_object"}``)

        Remaining arguments are those of ``HTTPInferenceAdapter``.
        """
        super().__init__(*args, **kwargs)
        self.json_mode = json_mode

    def preferred_model(self, model_type: ModelType) -> str:
        return model_type.optimal_openai_model()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _build_payload(
        self, prompt: str, model: str, request: InferenceRequest
    ) -> dict[str, Any]:
        max_tokens = request.max_tokens or request.model_type.typical_max_tokens()
        payload: dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
        }

        # Reasoning models take max_completion_tokens and only the default
        # temperature.
        if model.startswith(REASONING_MODEL_PREFIXES):
            payload["max_completion_tokens"] = max_tokens
        else:
            payload["max_tokens"] = max_tokens
            if request.temperature is not None:
                payload["temperature"] = request.temperature

        if self.json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    def _parse_completion(self, data: dict[str, Any]) -> Completion:
        usage = data.get("usage") or {}
        return Completion(
            text=data["choices"][0]["message"]["content"],
            model=data.get("model"),
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
        )
