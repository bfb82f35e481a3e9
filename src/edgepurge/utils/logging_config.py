"""Logging helpers for the debug-mode setting."""

import logging

PACKAGE_LOGGER = "edgepurge"


def set_debug_mode(enabled: bool) -> None:
    """Toggle verbose logging for every edgepurge module.

    Debug mode lowers the package logger to DEBUG; otherwise it stays at
    INFO, so warnings and errors are always emitted. Handlers are left to
    the host application.

    Args:
        enabled: Whether debug logging is on.
    """
    level = logging.DEBUG if enabled else logging.INFO
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
