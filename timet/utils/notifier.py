"""
Desktop notification service for timet.

This module provides desktop notification functionality with proper error handling,
logging integration, and configuration support.
"""

import asyncio
import concurrent.futures
import logging
import os
from typing import Optional

from desktop_notifier import DesktopNotifier

from .config import get_config_manager

logger = logging.getLogger(__name__)

# Global notifier instance
_notifier: Optional[DesktopNotifier] = None


def _get_notifier() -> DesktopNotifier:
    """Get or create the global DesktopNotifier instance."""
    global _notifier
    if _notifier is None:
        _notifier = DesktopNotifier(app_name="timet")
    return _notifier


def _is_headless() -> bool:
    return (
        (not os.environ.get("DISPLAY") and not os.environ.get("WAYLAND_DISPLAY"))
        or os.environ.get("CI") == "true"
        or os.environ.get("TIMET_HEADLESS") == "true"
    )


async def notify(title: str, message: str) -> Optional[str]:
    """
    Send a desktop notification asynchronously.

    Args:
        title: The notification title
        message: The notification message

    Returns:
        None if successful, error message string if failed
    """
    config = get_config_manager()

    if not config.are_notifications_enabled():
        if config.should_fallback_to_log():
            logger.info(f"[NOTIFICATION] {title}: {message}")
        return None

    if _is_headless():
        if config.should_fallback_to_log():
            logger.info(f"[NOTIFICATION] {title}: {message} (headless/CI environment)")
        return "Headless or CI environment"

    try:
        notifier = _get_notifier()
        await notifier.send(
            title=title, message=message, timeout=config.get_notification_timeout()
        )
        logger.debug(f"Notification sent: {title}")
        return None

    except Exception as e:
        error_msg = f"Failed to send notification: {e}"
        logger.error(error_msg)
        if config.should_fallback_to_log():
            logger.info(f"[NOTIFICATION] {title}: {message} (fallback)")
        return error_msg


def notify_sync(title: str, message: str) -> Optional[str]:
    """
    Send a desktop notification synchronously.

    Works both with and without a running event loop.

    Returns:
        None if successful, error message string if failed
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        try:
            return asyncio.run(notify(title, message))
        except Exception as e:
            logger.error(f"Failed to run notification: {e}")
            return str(e)

    # Inside a running loop: run the coroutine on a fresh loop in a worker thread
    try:
        with concurrent.futures.ThreadPoolExecutor() as executor:
            future = executor.submit(asyncio.run, notify(title, message))
            return future.result(timeout=10)
    except Exception as e:
        logger.error(f"Unexpected error in notify_sync: {e}")
        return str(e)


def notify_start(tag: str, notes: Optional[str] = None) -> Optional[str]:
    """Send a tracking-started notification if enabled in configuration."""
    config = get_config_manager()
    if not config.should_notify_start():
        return None

    notes_str = f" ({notes})" if notes else ""
    return notify_sync("timet - Tracking Started", f"Started tracking: {tag}{notes_str}")


def notify_stop(tag: str, duration: str) -> Optional[str]:
    """Send a tracking-stopped notification if enabled in configuration."""
    config = get_config_manager()
    if not config.should_notify_stop():
        return None

    return notify_sync("timet - Tracking Stopped", f"Stopped: {tag}\nDuration: {duration}")


def notify_error(error_message: str) -> Optional[str]:
    """Send an error notification if enabled in configuration."""
    config = get_config_manager()
    if not config.should_notify_errors():
        return None

    return notify_sync("timet - Error", error_message)
