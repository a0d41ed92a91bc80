"""Logging setup for bgcheck."""

from bgcheck.logging.setup import account_context, configure_logging, get_logger

__all__ = ["configure_logging", "get_logger", "account_context"]
