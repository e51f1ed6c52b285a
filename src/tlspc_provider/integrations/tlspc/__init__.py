"""Venafi TLS Protect Cloud API integration."""

from tlspc_provider.integrations.tlspc.client import TLSPCClient
from tlspc_provider.integrations.tlspc.config import DEFAULT_ENDPOINT, TLSPCConfig
from tlspc_provider.integrations.tlspc.exceptions import (
    TLSPCAPIError,
    TLSPCAuthError,
    TLSPCConfigError,
    TLSPCConnectionError,
    TLSPCDecodeError,
    TLSPCError,
    TLSPCGraphQLError,
    TLSPCNotFoundError,
    TLSPCValidationError,
)

__all__ = [
    "DEFAULT_ENDPOINT",
    "TLSPCAPIError",
    "TLSPCAuthError",
    "TLSPCClient",
    "TLSPCConfig",
    "TLSPCConfigError",
    "TLSPCConnectionError",
    "TLSPCDecodeError",
    "TLSPCError",
    "TLSPCGraphQLError",
    "TLSPCNotFoundError",
    "TLSPCValidationError",
]
