"""Unit tests for the GraphQL transport."""

from __future__ import annotations

import json
from collections.abc import Generator

import httpx
import pytest
import respx
from httpx import Response

from tlspc_provider.integrations.tlspc.config import TLSPCConfig
from tlspc_provider.integrations.tlspc.exceptions import (
    TLSPCAPIError,
    TLSPCAuthError,
    TLSPCConnectionError,
    TLSPCDecodeError,
    TLSPCGraphQLError,
)
from tlspc_provider.integrations.tlspc.graphql import GraphQLClient

GRAPHQL_URL = "https://api.test.venafi.cloud/graphql"


@pytest.fixture
def graphql(tlspc_config: TLSPCConfig) -> Generator[GraphQLClient]:
    """Create a GraphQL client against the mocked API."""
    client = GraphQLClient(tlspc_config)
    yield client
    client.close()


@pytest.mark.unit
class TestGraphQLExecute:
    """Tests for GraphQLClient.execute."""

    @respx.mock
    def test_returns_data(self, graphql: GraphQLClient) -> None:
        """The data object is returned and the request is a JSON POST."""
        route = respx.post(GRAPHQL_URL).mock(
            return_value=Response(200, json={"data": {"ok": True}})
        )
        result = graphql.execute("query Q { ok }", {"a": 1}, operation_name="Q")

        assert result == {"ok": True}
        request = route.calls.last.request
        assert json.loads(request.content) == {
            "query": "query Q { ok }",
            "variables": {"a": 1},
            "operationName": "Q",
        }
        assert request.headers["tppl-api-key"] == "test-api-key"

    @respx.mock
    def test_errors_raise(self, graphql: GraphQLClient) -> None:
        """A response with errors raises even on 200."""
        respx.post(GRAPHQL_URL).mock(
            return_value=Response(
                200, json={"data": None, "errors": [{"message": "bad id"}, {"message": "x"}]}
            )
        )
        with pytest.raises(TLSPCGraphQLError) as exc_info:
            graphql.execute("query { a }")
        assert "bad id; x" in exc_info.value.message
        assert len(exc_info.value.errors) == 2

    @respx.mock
    def test_auth_error(self, graphql: GraphQLClient) -> None:
        """401 is an auth error."""
        respx.post(GRAPHQL_URL).mock(return_value=Response(401, text="denied"))
        with pytest.raises(TLSPCAuthError):
            graphql.execute("query { a }")

    @respx.mock
    def test_http_error_without_errors(self, graphql: GraphQLClient) -> None:
        """A failing status with a JSON body but no errors is an API error."""
        respx.post(GRAPHQL_URL).mock(return_value=Response(502, json={"message": "down"}))
        with pytest.raises(TLSPCAPIError, match="GraphQL request failed"):
            graphql.execute("query { a }")

    @respx.mock
    def test_non_json_body(self, graphql: GraphQLClient) -> None:
        """A body that is not JSON is a decode error."""
        respx.post(GRAPHQL_URL).mock(return_value=Response(200, text="oops"))
        with pytest.raises(TLSPCDecodeError):
            graphql.execute("query { a }")

    @respx.mock
    def test_missing_data(self, graphql: GraphQLClient) -> None:
        """A response without data is a decode error."""
        respx.post(GRAPHQL_URL).mock(return_value=Response(200, json={}))
        with pytest.raises(TLSPCDecodeError, match="no data"):
            graphql.execute("query { a }")

    @respx.mock
    def test_transport_error(self, graphql: GraphQLClient) -> None:
        """Transport failures become connection errors."""
        respx.post(GRAPHQL_URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(TLSPCConnectionError):
            graphql.execute("query { a }")
