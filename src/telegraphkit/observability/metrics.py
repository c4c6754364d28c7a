"""
Prometheus collectors for the request pipeline.

Collectors are looked up in the default registry before being created, so a
module reload or a second import path reuses them instead of raising
``Duplicated timeseries``.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence, Type

from prometheus_client import REGISTRY, Counter, Histogram
from prometheus_client.metrics import MetricWrapperBase


def _get_or_create(
    metric_cls: Type[MetricWrapperBase],
    name: str,
    documentation: str,
    labelnames: Sequence[str] = (),
    **kwargs: Any,
) -> Any:
    registered = REGISTRY._names_to_collectors.get(name)  # type: ignore[attr-defined]
    if registered is not None:
        return registered
    try:
        return metric_cls(name, documentation, labelnames, **kwargs)
    except ValueError:
        # Lost a registration race with another import
        return REGISTRY._names_to_collectors[name]  # type: ignore[attr-defined]


METRICS: Dict[str, Any] = {
    "requests_total": _get_or_create(
        Counter,
        "telegraph_requests_total",
        "Dispatches by API method and final outcome",
        ["method", "outcome"],
    ),
    "retries_total": _get_or_create(
        Counter,
        "telegraph_retries_total",
        "Retry attempts scheduled after a transient failure",
        ["method"],
    ),
    "rate_limit_wait_seconds": _get_or_create(
        Histogram,
        "telegraph_rate_limit_wait_seconds",
        "Time spent waiting for a rate-limit token",
        buckets=(0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
    ),
    "request_latency_seconds": _get_or_create(
        Histogram,
        "telegraph_request_latency_seconds",
        "Time taken by a dispatch including retries",
        ["method"],
        buckets=(0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
    ),
}
