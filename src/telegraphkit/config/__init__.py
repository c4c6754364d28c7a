from .config import ClientConfig, MonitoringConfig, RateLimitPolicy, RetryPolicy

__all__ = ["ClientConfig", "MonitoringConfig", "RateLimitPolicy", "RetryPolicy"]
