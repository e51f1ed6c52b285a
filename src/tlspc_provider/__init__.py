"""Declarative resource management for Venafi TLS Protect Cloud."""

from tlspc_provider.__version__ import __version__

__all__ = ["__version__"]
