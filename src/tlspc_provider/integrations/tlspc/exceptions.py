"""TLS Protect Cloud API exceptions."""

from __future__ import annotations


class TLSPCError(Exception):
    """Base exception for TLS Protect Cloud errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message.
            details: Additional details.
        """
        super().__init__(message)
        self.message = message
        self.details = details


class TLSPCConfigError(TLSPCError):
    """Raised when provider configuration is invalid or missing."""


class TLSPCValidationError(TLSPCError):
    """Raised when a desired configuration is rejected before any API call."""


class TLSPCConnectionError(TLSPCError):
    """Raised when the API cannot be reached (DNS, TLS, connect, timeout)."""


class TLSPCAPIError(TLSPCError):
    """Raised when the API answers with something other than the expected result.

    The raw response body is always kept so the caller can see what the
    vendor actually said.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message.
            status_code: HTTP status code.
            response_body: Raw response body.
            endpoint: Request path that failed.
        """
        super().__init__(message, details=response_body)
        self.status_code = status_code
        self.response_body = response_body
        self.endpoint = endpoint

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.endpoint:
            parts.append(f"[endpoint: {self.endpoint}]")
        if self.response_body:
            parts.append(f"response was: {self.response_body}")
        return " ".join(parts)


class TLSPCAuthError(TLSPCAPIError):
    """Raised when the API key is rejected (401/403)."""


class TLSPCNotFoundError(TLSPCAPIError):
    """Raised when a resource does not exist."""


class TLSPCDecodeError(TLSPCAPIError):
    """Raised when a response body cannot be decoded."""


class TLSPCGraphQLError(TLSPCAPIError):
    """Raised when a GraphQL response carries errors."""

    def __init__(
        self,
        message: str,
        errors: list[dict[str, object]] | None = None,
        status_code: int | None = None,
        response_body: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message.
            errors: The ``errors`` array from the GraphQL response.
            status_code: HTTP status code.
            response_body: Raw response body.
            endpoint: GraphQL endpoint.
        """
        super().__init__(message, status_code, response_body, endpoint)
        self.errors = errors or []
