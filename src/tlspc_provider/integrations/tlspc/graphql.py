"""Minimal GraphQL transport for the TLS Protect Cloud GraphQL API.

Requests are plain JSON POSTs of ``{"query", "variables"}`` to
``{endpoint}/graphql`` carrying the same headers as the REST client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog

from tlspc_provider.integrations.tlspc.exceptions import (
    TLSPCAPIError,
    TLSPCAuthError,
    TLSPCConnectionError,
    TLSPCDecodeError,
    TLSPCGraphQLError,
)

if TYPE_CHECKING:
    from tlspc_provider.integrations.tlspc.config import TLSPCConfig

logger = structlog.get_logger()


class GraphQLClient:
    """Executes GraphQL documents and returns their ``data`` object."""

    def __init__(self, config: TLSPCConfig) -> None:
        """Initialize GraphQL client.

        Args:
            config: Provider configuration.
        """
        self.config = config
        self.url = config.graphql_url
        self._client = httpx.Client(
            timeout=httpx.Timeout(config.timeout),
            headers=config.headers(),
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def execute(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> dict[str, Any]:
        """Execute a query or mutation.

        Args:
            document: GraphQL document.
            variables: Operation variables.
            operation_name: Operation to run when the document has several.

        Returns:
            The ``data`` object of the response.

        Raises:
            TLSPCConnectionError: On transport failure.
            TLSPCAuthError: On 401/403.
            TLSPCGraphQLError: When the response carries ``errors``.
            TLSPCDecodeError: When the body is not a GraphQL response.
            TLSPCAPIError: On any other non-2xx status.
        """
        payload: dict[str, Any] = {"query": document, "variables": variables or {}}
        if operation_name:
            payload["operationName"] = operation_name

        log = logger.bind(operation=operation_name)
        log.debug("graphql_request")
        try:
            response = self._client.post(self.url, json=payload)
        except httpx.TimeoutException as e:
            log.error("graphql_timeout", error=str(e))
            raise TLSPCConnectionError(
                "Request to TLS Protect Cloud GraphQL API timed out", details=str(e)
            ) from e
        except httpx.TransportError as e:
            log.error("graphql_connection_error", error=str(e))
            raise TLSPCConnectionError(
                f"Failed to connect to TLS Protect Cloud GraphQL API: {e}", details=str(e)
            ) from e

        body = response.text
        if response.status_code in (401, 403):
            raise TLSPCAuthError(
                "TLS Protect Cloud rejected the API key",
                status_code=response.status_code,
                response_body=body,
                endpoint=self.url,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TLSPCDecodeError(
                "Error decoding GraphQL response",
                status_code=response.status_code,
                response_body=body,
                endpoint=self.url,
            ) from e
        if not isinstance(data, dict):
            raise TLSPCDecodeError(
                "Error decoding GraphQL response",
                status_code=response.status_code,
                response_body=body,
                endpoint=self.url,
            )

        errors = data.get("errors")
        if errors:
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            )
            log.warning("graphql_errors", count=len(errors))
            raise TLSPCGraphQLError(
                f"GraphQL error: {messages}",
                errors=errors,
                status_code=response.status_code,
                response_body=body,
                endpoint=self.url,
            )

        if response.status_code >= 400:
            raise TLSPCAPIError(
                "GraphQL request failed",
                status_code=response.status_code,
                response_body=body,
                endpoint=self.url,
            )

        result = data.get("data")
        if not isinstance(result, dict):
            raise TLSPCDecodeError(
                "GraphQL response has no data",
                status_code=response.status_code,
                response_body=body,
                endpoint=self.url,
            )
        log.debug("graphql_response", status=response.status_code)
        return result
