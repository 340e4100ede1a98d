"""Observability module for logging."""

from holdem_table.observability.logger import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
