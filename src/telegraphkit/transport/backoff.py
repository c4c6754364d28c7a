"""
Exponential backoff schedule for retried requests.
"""

from __future__ import annotations

from telegraphkit.config.config import RetryPolicy


def compute_delay(attempt: int, policy: RetryPolicy) -> float:
    """Delay in seconds to wait before ``attempt``.

    Attempt 0 is the first try and never waits. Attempt ``n >= 1`` waits
    ``initial_delay * multiplier ** (n - 1)``, capped at ``max_delay``.
    """
    if attempt <= 0:
        return 0.0
    try:
        delay = policy.initial_delay * policy.multiplier ** (attempt - 1)
    except OverflowError:
        return policy.max_delay
    return min(policy.max_delay, delay)
