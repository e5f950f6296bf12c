"""Tests for RetryPolicy."""

from __future__ import annotations

import pytest

from inference_port.errors import BackendError, BackendUnavailable
from inference_port.retry import NO_RETRY, RetryPolicy


class Flaky:
    """Fails with the given errors, then returns "ok"."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    async def __call__(self, value="ok"):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return value


POLICY = RetryPolicy(max_retries=2, initial_delay=0.0, jitter=False)


@pytest.mark.asyncio
async def test_success_without_retry():
    func = Flaky()
    assert await POLICY.execute(func, value="done") == "done"
    assert func.calls == 1


@pytest.mark.asyncio
async def test_retries_unavailable_until_success():
    func = Flaky(BackendUnavailable("down"), BackendUnavailable("down"))
    assert await POLICY.execute(func) == "ok"
    assert func.calls == 3


@pytest.mark.asyncio
async def test_gives_up_after_max_retries():
    func = Flaky(*(BackendUnavailable(f"down {i}") for i in range(5)))
    with pytest.raises(BackendUnavailable, match="down 2"):
        await POLICY.execute(func)
    assert func.calls == 3


@pytest.mark.asyncio
async def test_non_retryable_raises_immediately():
    func = Flaky(BackendError("bad request"))
    with pytest.raises(BackendError):
        await POLICY.execute(func)
    assert func.calls == 1


@pytest.mark.asyncio
async def test_no_retry_policy():
    func = Flaky(BackendUnavailable("down"))
    with pytest.raises(BackendUnavailable):
        await NO_RETRY.execute(func)
    assert func.calls == 1


@pytest.mark.parametrize(
    "backoff,expected",
    [
        ("exponential", [1.0, 2.0, 4.0, 5.0]),
        ("linear", [1.0, 2.0, 3.0, 4.0]),
        ("fixed", [1.0, 1.0, 1.0, 1.0]),
    ],
)
def test_delay_calculation(backoff, expected):
    policy = RetryPolicy(initial_delay=1.0, max_delay=5.0, backoff=backoff)
    assert [policy._calculate_delay(attempt) for attempt in range(4)] == expected


def test_negative_retries_rejected():
    with pytest.raises(ValueError):
        RetryPolicy(max_retries=-1)
