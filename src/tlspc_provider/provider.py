"""Provider bootstrap.

A ``Provider`` resolves its configuration once, builds a single API client
and hands that client to every reconciler and lookup it creates.

Example:
    ```python
    from tlspc_provider.provider import Provider

    provider = Provider()
    provider.configure(api_key="...")
    teams = provider.resource("tlspc_team")
    state = teams.create(teams.parse({"name": "ops", "role": "PLATFORM_ADMIN", "owners": [...]}))
    ```
"""

from __future__ import annotations

from typing import Any, TypeVar

import structlog

from tlspc_provider.__version__ import __version__
from tlspc_provider.integrations.tlspc.client import TLSPCClient
from tlspc_provider.integrations.tlspc.config import TLSPCConfig
from tlspc_provider.integrations.tlspc.exceptions import TLSPCConfigError
from tlspc_provider.services import (
    ApplicationReconciler,
    BaseLookup,
    BaseReconciler,
    CAProductLookup,
    CertificateTemplateLookup,
    CertificateTemplateReconciler,
    CloudProviderGCPReconciler,
    CloudProviderGCPValidateReconciler,
    DeclaredType,
    FireflyConfigReconciler,
    FireflyPolicyReconciler,
    FireflySubCAReconciler,
    PluginReconciler,
    RegistryAccountReconciler,
    ServiceAccountReconciler,
    TeamReconciler,
    UserLookup,
)

logger = structlog.get_logger()

RESOURCES: dict[str, type[BaseReconciler[Any]]] = {
    r.type_name: r
    for r in (
        TeamReconciler,
        ServiceAccountReconciler,
        RegistryAccountReconciler,
        PluginReconciler,
        CertificateTemplateReconciler,
        ApplicationReconciler,
        FireflySubCAReconciler,
        FireflyPolicyReconciler,
        FireflyConfigReconciler,
        CloudProviderGCPReconciler,
        CloudProviderGCPValidateReconciler,
    )
}

DATA_SOURCES: dict[str, type[BaseLookup[Any]]] = {
    d.type_name: d for d in (UserLookup, CAProductLookup, CertificateTemplateLookup)
}


class Provider:
    """TLS Protect Cloud provider.

    Attributes:
        version: Provider version stamped into the User-Agent.
        config: Resolved configuration, None until ``configure`` is called.
    """

    def __init__(self, version: str = __version__) -> None:
        self.version = version
        self.config: TLSPCConfig | None = None
        self._client: TLSPCClient | None = None

    def __enter__(self) -> Provider:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def configure(self, api_key: str | None = None, endpoint: str | None = None) -> None:
        """Resolve configuration and build the shared API client.

        Declared values override ``TLSPC_APIKEY``/``TLSPC_ENDPOINT``, which
        override the config file. Configuring again replaces the client.

        Raises:
            TLSPCConfigError: If no API key can be found or a value is invalid.
        """
        self.config = TLSPCConfig.resolve(api_key=api_key, endpoint=endpoint, version=self.version)
        self.close()
        self._client = TLSPCClient(self.config)
        logger.info("Provider configured", endpoint=self.config.endpoint, version=self.version)

    @property
    def client(self) -> TLSPCClient:
        """The shared API client.

        Raises:
            TLSPCConfigError: If ``configure`` has not been called.
        """
        if self._client is None:
            raise TLSPCConfigError(
                "Provider is not configured", details="Call configure() before using resources"
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def resource_types(self) -> list[str]:
        """Registered resource type names."""
        return sorted(RESOURCES)

    def data_source_types(self) -> list[str]:
        """Registered data source type names."""
        return sorted(DATA_SOURCES)

    def resource(self, type_name: str) -> BaseReconciler[Any]:
        """Get a reconciler bound to the shared client.

        Raises:
            TLSPCConfigError: If the type is unknown or the provider is not configured.
        """
        return _lookup_type(RESOURCES, type_name, "resource")(self.client)

    def data_source(self, type_name: str) -> BaseLookup[Any]:
        """Get a lookup bound to the shared client.

        Raises:
            TLSPCConfigError: If the type is unknown or the provider is not configured.
        """
        return _lookup_type(DATA_SOURCES, type_name, "data source")(self.client)

    def schema(self, type_name: str) -> dict[str, Any]:
        """JSON schema of a resource's or data source's attributes.

        Resources win when a resource and a data source share a name.
        """
        if type_name in RESOURCES:
            return RESOURCES[type_name].schema()
        return _lookup_type(DATA_SOURCES, type_name, "resource or data source").schema()


T = TypeVar("T", bound=DeclaredType[Any])


def _lookup_type(
    registry: dict[str, type[T]], type_name: str, kind: str
) -> type[T]:
    try:
        return registry[type_name]
    except KeyError:
        raise TLSPCConfigError(
            f"Unknown {kind} type: {type_name}",
            details=f"Available: {', '.join(sorted(registry))}",
        ) from None
