"""Logging configuration for observers."""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Args:
        name: Module or logger name, namespaced under 'observers.' if it is not already

    Returns:
        A logger instance
    """
    if name == "observers" or name.startswith("observers."):
        return logging.getLogger(name)
    return logging.getLogger(f"observers.{name}")
