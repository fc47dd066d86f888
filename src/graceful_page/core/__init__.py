"""Retry policy, settings and type definitions."""

from .config import load_settings
from .policies import BackoffRequested, RetryPolicy
from .types import PageProvider, PageSettings, RecoveryAction

__all__ = [
    "BackoffRequested",
    "PageProvider",
    "PageSettings",
    "RecoveryAction",
    "RetryPolicy",
    "load_settings",
]
