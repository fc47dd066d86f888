"""Graceful page handle and the failure handling behind it."""

from .errors import (
    GotoError,
    GotoErrorDetails,
    classify_navigation_error,
    classify_operation_error,
    is_engine_memory_reclaimed,
    is_page_crash,
    is_transient_network_error,
)
from .page import GracefulPage
from .retry_after import parse_retry_after

__all__ = [
    "GotoError",
    "GotoErrorDetails",
    "GracefulPage",
    "classify_navigation_error",
    "classify_operation_error",
    "is_engine_memory_reclaimed",
    "is_page_crash",
    "is_transient_network_error",
    "parse_retry_after",
]
