"""Version information for tlspc_provider."""

__version__ = "0.1.0"
