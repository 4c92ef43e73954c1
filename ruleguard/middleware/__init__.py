"""HTTP middleware: correlation IDs, metrics, payload limits and error responses."""
from .correlation import CorrelationIdMiddleware, get_correlation_id
from .error_handler import ErrorHandlerMiddleware
from .metrics import MetricsMiddleware
from .payload_size import PayloadSizeMiddleware

__all__ = [
    "CorrelationIdMiddleware",
    "ErrorHandlerMiddleware",
    "MetricsMiddleware",
    "PayloadSizeMiddleware",
    "get_correlation_id",
]
