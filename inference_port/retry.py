"""Retry policy for transient backend failures."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import Literal, TypeVar

from pydantic import BaseModel, Field

from .errors import InferenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """Retry retryable ``InferenceError``s with configurable backoff.

    Only errors flagged ``retryable`` (``BackendUnavailable``) are retried.
    The caller sees a single result: the first success or the last error.
    """

    max_retries: int = Field(2, ge=0)
    initial_delay: float = Field(0.5, ge=0.0)  # seconds
    max_delay: float = Field(8.0, ge=0.0)  # seconds
    backoff: Literal["exponential", "linear", "fixed"] = "exponential"
    jitter: bool = True

    async def execute(
        self, func: Callable[..., Awaitable[T]], *args, **kwargs
    ) -> T:
        """Execute ``func`` with retry logic.

        Raises:
            InferenceError: The last error once retries are exhausted, or the
                first non-retryable one.
        """
        for attempt in range(self.max_retries + 1):
            try:
                return await func(*args, **kwargs)
            except InferenceError as e:
                if not e.retryable or attempt == self.max_retries:
                    raise

                delay = self._calculate_delay(attempt)
                if self.jitter:
                    delay = delay * (0.5 + random.random())

                logger.debug(
                    "Retrying after %s (attempt %d/%d, sleeping %.2fs)",
                    e.kind.value,
                    attempt + 1,
                    self.max_retries,
                    delay,
                )
                await asyncio.sleep(delay)

        raise AssertionError("unreachable")

    def _calculate_delay(self, attempt: int) -> float:
        """Calculate delay for retry attempt (0-based)."""
        if self.backoff == "exponential":
            delay = self.initial_delay * (2**attempt)
        elif self.backoff == "linear":
            delay = self.initial_delay * (attempt + 1)
        else:
            delay = self.initial_delay

        return min(delay, self.max_delay)


NO_RETRY = RetryPolicy(max_retries=0)
