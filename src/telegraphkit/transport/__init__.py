"""
telegraphkit transport layer.

- ResilientDispatcher: throttled send loop with retries and deadlines
- TokenBucket: client-wide rate governor
- compute_delay: exponential backoff schedule
- unify: response envelope decoding
"""

from .backoff import compute_delay
from .dispatcher import ResilientDispatcher, is_retryable_status
from .rate_limiter import TokenBucket
from .unifier import Envelope, ErrorEnvelope, RawResponse, unify

__all__ = [
    "Envelope",
    "ErrorEnvelope",
    "RawResponse",
    "ResilientDispatcher",
    "TokenBucket",
    "compute_delay",
    "is_retryable_status",
    "unify",
]
