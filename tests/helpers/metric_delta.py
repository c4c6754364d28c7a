"""
Helpers for validating metric value changes during tests.

Metrics are read from the default Prometheus registry by sample name and
label set, so labelled counters and histograms can be checked the same way.
"""

from contextlib import contextmanager
from typing import Dict, Optional

from prometheus_client import REGISTRY


def sample_value(name: str, labels: Optional[Dict[str, str]] = None) -> float:
    """Current value of one sample, 0.0 when it has not been created yet."""
    value = REGISTRY.get_sample_value(name, labels or {})
    return value if value is not None else 0.0


@contextmanager
def metric_delta(name: str, labels: Optional[Dict[str, str]] = None, expected_delta: float = 1):
    """
    Context manager to validate the exact change of a sample.

    Usage:
        with metric_delta("telegraph_retries_total", {"method": "getViews"}, 2):
            # Code that should schedule exactly two retries
            pass
    """
    initial_value = sample_value(name, labels)

    yield

    final_value = sample_value(name, labels)
    actual_delta = final_value - initial_value

    if actual_delta != expected_delta:
        raise AssertionError(
            f"Expected {name}{labels or ''} to change by {expected_delta}, "
            f"but it changed by {actual_delta} "
            f"(from {initial_value} to {final_value})"
        )


@contextmanager
def histogram_observes(name: str, labels: Optional[Dict[str, str]] = None, min_observations: int = 1):
    """
    Context manager to validate histogram observations.

    Usage:
        with histogram_observes("telegraph_request_latency_seconds", {"method": "getPage"}):
            # Code that should record at least one timing observation
            pass
    """
    initial_count = sample_value(f"{name}_count", labels)

    yield

    final_count = sample_value(f"{name}_count", labels)
    actual_observations = final_count - initial_count

    if actual_observations < min_observations:
        raise AssertionError(
            f"Expected at least {min_observations} observations of {name}, "
            f"but got {actual_observations} "
            f"(count went from {initial_count} to {final_count})"
        )
