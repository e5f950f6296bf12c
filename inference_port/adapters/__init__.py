"""Inference service adapters."""

from .anthropic import AnthropicAdapter
from .base import Completion, HTTPInferenceAdapter
from .connection_pool import HTTPConnectionPool
from .mock import MockInferenceService
from .openai_compatible import OpenAICompatibleAdapter

__all__ = [
    "AnthropicAdapter",
    "Completion",
    "HTTPConnectionPool",
    "HTTPInferenceAdapter",
    "MockInferenceService",
    "OpenAICompatibleAdapter",
]
