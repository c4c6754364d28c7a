"""
telegraphkit - async client for the Telegraph publishing API.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .api import TelegraphClient
from .config import ClientConfig, MonitoringConfig, RateLimitPolicy, RetryPolicy
from .content import ContentBuilder, ConversionOverrides, ElementNode, MarkupConverter, TextNode, convert_html
from .errors import (
    APIError,
    DeadlineExceededError,
    MarkupParseError,
    RequestCancelledError,
    RequestValidationError,
    ResponseDecodeError,
    RetriesExhaustedError,
    SerializationError,
    TelegraphError,
    TransientTransportError,
)

__all__ = [
    "__version__",
    "APIError",
    "ClientConfig",
    "ContentBuilder",
    "ConversionOverrides",
    "DeadlineExceededError",
    "ElementNode",
    "MarkupConverter",
    "MarkupParseError",
    "MonitoringConfig",
    "RateLimitPolicy",
    "RequestCancelledError",
    "RequestValidationError",
    "ResponseDecodeError",
    "RetriesExhaustedError",
    "RetryPolicy",
    "SerializationError",
    "TelegraphClient",
    "TelegraphError",
    "TextNode",
    "TransientTransportError",
    "convert_html",
]
