"""Logging configuration for tlspc_provider."""

from tlspc_provider.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
