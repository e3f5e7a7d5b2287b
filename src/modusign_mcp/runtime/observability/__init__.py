"""Observability - structured logging for the client and tool layers."""

from .logging import BoundLogger, configure_logging, get_logger, log_context

__all__ = ["BoundLogger", "configure_logging", "get_logger", "log_context"]
