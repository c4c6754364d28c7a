"""
Resilient request dispatcher: throttle, send, classify, retry.
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

import aiohttp
import structlog

from telegraphkit.config.config import RetryPolicy
from telegraphkit.errors import (
    DeadlineExceededError,
    RequestValidationError,
    RetriesExhaustedError,
    SerializationError,
    TransientTransportError,
)
from telegraphkit.observability.metrics import METRICS
from telegraphkit.transport.backoff import compute_delay
from telegraphkit.transport.rate_limiter import TokenBucket
from telegraphkit.transport.unifier import RawResponse

logger = structlog.get_logger(__name__)

PHASE_BACKOFF = "backoff wait"
PHASE_RATE_LIMIT = "rate-limit wait"
PHASE_NETWORK = "network"


def is_retryable_status(status: int) -> bool:
    """Server errors and 429 are retried; everything else is final."""
    return status >= 500 or status == 429


@dataclass
class _DispatchState:
    """Where a dispatch currently is; read when a deadline fires."""

    api_method: str
    attempt: int = 0
    phase: str = PHASE_RATE_LIMIT
    last_error: Optional[BaseException] = None


class ResilientDispatcher:
    """
    Sends JSON requests with rate limiting and exponential-backoff retries.

    One dispatcher serves every call of a client. Dispatches run concurrently;
    the shared token bucket is the only state they contend on.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        *,
        retry: RetryPolicy,
        limiter: TokenBucket,
        timeout: float = 30.0,
        user_agent: str = "telegraphkit",
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.retry = retry
        self.limiter = limiter
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._headers = {
            "Content-Type": "application/json",
            "User-Agent": user_agent,
        }

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _encode(body: Any) -> Optional[bytes]:
        if body is None:
            return None
        try:
            return json.dumps(body, ensure_ascii=False, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"failed to marshal request data: {exc}") from exc

    async def dispatch(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        """
        Send one logical request, retrying transient failures.

        Args:
            method: HTTP verb
            path: Endpoint path relative to the base URL
            body: JSON-serializable request body, or None
            params: Query parameters
            timeout: Deadline in seconds for the whole dispatch, retries included

        Returns:
            RawResponse for the first non-retryable status

        Raises:
            SerializationError: body is not JSON-serializable
            RetriesExhaustedError: every attempt failed transiently
            DeadlineExceededError: ``timeout`` expired while suspended
            asyncio.CancelledError: the calling task was cancelled
        """
        if not method or not path:
            raise RequestValidationError("method and path must be non-empty")

        payload = self._encode(body)
        api_method = path.strip("/").split("?", 1)[0] or path
        state = _DispatchState(api_method=api_method)
        start_time = time.monotonic()

        with structlog.contextvars.bound_contextvars(request_id=uuid4().hex[:12], api_method=api_method):
            deadline = asyncio.timeout(timeout)
            try:
                async with deadline:
                    response = await self._run(method, self._url(path), payload, params, state)
            except TimeoutError as exc:
                if not deadline.expired():
                    raise
                METRICS["requests_total"].labels(method=api_method, outcome="deadline").inc()
                logger.warning("Dispatch deadline exceeded", phase=state.phase, attempt=state.attempt, timeout=timeout)
                raise DeadlineExceededError(timeout or 0.0, state.phase, state.attempt) from exc
            except asyncio.CancelledError:
                METRICS["requests_total"].labels(method=api_method, outcome="cancelled").inc()
                logger.info("Dispatch cancelled", phase=state.phase, attempt=state.attempt)
                raise
            except RetriesExhaustedError:
                METRICS["requests_total"].labels(method=api_method, outcome="exhausted").inc()
                raise
            finally:
                METRICS["request_latency_seconds"].labels(method=api_method).observe(time.monotonic() - start_time)

        METRICS["requests_total"].labels(method=api_method, outcome=str(response.status)).inc()
        return response

    async def _run(
        self,
        method: str,
        url: str,
        payload: Optional[bytes],
        params: Optional[Mapping[str, str]],
        state: _DispatchState,
    ) -> RawResponse:
        max_attempts = self.retry.max_retries + 1

        for attempt in range(max_attempts):
            state.attempt = attempt + 1

            if attempt > 0:
                delay = compute_delay(attempt, self.retry)
                state.phase = PHASE_BACKOFF
                METRICS["retries_total"].labels(method=state.api_method).inc()
                logger.info(
                    "Retrying request",
                    url=url,
                    attempt=state.attempt,
                    max_attempts=max_attempts,
                    delay=delay,
                    reason=str(state.last_error),
                )
                await asyncio.sleep(delay)

            state.phase = PHASE_RATE_LIMIT
            waited = await self.limiter.acquire()
            METRICS["rate_limit_wait_seconds"].observe(waited)

            state.phase = PHASE_NETWORK
            try:
                status, body, headers = await self._send(method, url, payload, params)
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                detail = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
                error = TransientTransportError(detail)
                error.__cause__ = exc
                state.last_error = error
                logger.warning("Request failed", url=url, attempt=state.attempt, error=str(exc) or type(exc).__name__)
                continue

            if is_retryable_status(status):
                state.last_error = TransientTransportError(f"received status code {status}", status=status)
                logger.warning("Retryable status received", url=url, attempt=state.attempt, status=status)
                continue

            return RawResponse(status=status, body=body, headers=headers, attempts=state.attempt)

        assert state.last_error is not None
        logger.error("Retries exhausted", url=url, attempts=max_attempts, error=str(state.last_error))
        raise RetriesExhaustedError(max_attempts, state.last_error) from state.last_error

    async def _send(
        self,
        method: str,
        url: str,
        payload: Optional[bytes],
        params: Optional[Mapping[str, str]],
    ) -> tuple[int, bytes, Dict[str, str]]:
        async with self.session.request(
            method,
            url,
            data=payload,
            params=params,
            headers=self._headers,
            timeout=self._timeout,
        ) as response:
            body = await response.read()
            return response.status, body, dict(response.headers)
