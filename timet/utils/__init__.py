"""Utility functions for timet."""

from .notifier import (
    notify,
    notify_error,
    notify_start,
    notify_stop,
    notify_sync,
)

__all__ = [
    "notify",
    "notify_sync",
    "notify_start",
    "notify_stop",
    "notify_error",
]
