import importlib

import pytest
from telegraphkit.observability import metrics


@pytest.mark.unit
class TestMetricsRegistry:
    def test_expected_metrics_exist(self):
        assert set(metrics.METRICS) == {
            "requests_total",
            "retries_total",
            "rate_limit_wait_seconds",
            "request_latency_seconds",
        }

    def test_reload_reuses_registered_collectors(self):
        before = metrics.METRICS["requests_total"]
        reloaded = importlib.reload(metrics)
        assert reloaded.METRICS["requests_total"] is before
