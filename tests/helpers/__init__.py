from .metric_delta import histogram_observes, metric_delta, sample_value

__all__ = ["histogram_observes", "metric_delta", "sample_value"]
