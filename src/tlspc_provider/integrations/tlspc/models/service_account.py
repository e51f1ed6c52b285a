"""Pydantic models for TLS Protect Cloud service accounts.

One API entity backs three different kinds of account. Which kind an
account is follows from its authentication type:

* ``rsaKey``: a key-based agent holding a public key.
* ``rsaKeyFederated``: a workload-identity issuer trusted through JWKS.
* ``ociToken``: pull credentials for the OCI registry.

The ``*Auth`` models carry only the fields of one kind, so a parsed
configuration can never mix them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import ConfigDict, Field

from tlspc_provider.integrations.tlspc.models.base import TLSPCEntity, TLSPCModel

AUTH_RSA_KEY = "rsaKey"
AUTH_RSA_KEY_FEDERATED = "rsaKeyFederated"
AUTH_OCI_TOKEN = "ociToken"


class ServiceAccount(TLSPCEntity):
    """TLS Protect Cloud service account as exchanged with the REST API."""

    _entity_name: ClassVar[str] = "service account"

    name: str = Field(default="", description="Service account name")
    owner: str = Field(default="", description="Owning team ID")
    scopes: list[str] = Field(default_factory=list, description="Granted scopes")
    credential_lifetime: int | None = Field(default=None, description="Credential lifetime in days")
    public_key: str | None = Field(default=None, description="PEM public key (agents)")
    authentication_type: str | None = Field(default=None, description="Authentication type tag")
    oci_account_name: str | None = Field(default=None, description="Generated OCI account name")
    oci_registry_token: str | None = Field(default=None, description="Generated OCI token")
    jwks_uri: str | None = Field(default=None, alias="jwksURI", description="JWKS URI")
    issuer_url: str | None = Field(default=None, alias="issuerURL", description="Token issuer")
    audience: str | None = Field(default=None, description="Expected token audience")
    subject: str | None = Field(default=None, description="Expected token subject")
    applications: list[str] | None = Field(default=None, description="Application IDs")
    credential_expiry: datetime | None = Field(default=None, description="Credential expiry")

    @classmethod
    def for_auth(cls, auth: ServiceAccountAuth, **fields: Any) -> ServiceAccount:
        """Build an account carrying exactly one authentication variant."""
        return cls(
            authentication_type=auth.authentication_type, **fields, **auth.account_fields()
        )

    @property
    def auth_variant(self) -> type[ServiceAccountAuth] | None:
        """Variant class matching ``authentication_type``, None when unknown."""
        return AUTH_VARIANTS.get(self.authentication_type or "")

    def to_create_payload(self) -> dict[str, Any]:
        """Server-generated fields are never sent."""
        return self.to_payload(
            exclude={"id", "oci_account_name", "oci_registry_token", "credential_expiry"}
        )


class _AuthVariant(TLSPCModel):
    model_config = ConfigDict(frozen=True)

    authentication_type: ClassVar[str]

    def account_fields(self) -> dict[str, Any]:
        """Fields to set on a ServiceAccount for this variant."""
        return self.model_dump()


class KeyAgentAuth(_AuthVariant):
    """Key-based agent authenticating with its own RSA key pair."""

    authentication_type: ClassVar[str] = AUTH_RSA_KEY

    public_key: str | None = None
    credential_lifetime: int | None = None


class FederatedIssuerAuth(_AuthVariant):
    """Workload identity federated through an external token issuer."""

    authentication_type: ClassVar[str] = AUTH_RSA_KEY_FEDERATED

    jwks_uri: str | None = None
    issuer_url: str | None = None
    audience: str | None = None
    subject: str | None = None
    applications: list[str] = Field(default_factory=list)


class RegistryTokenAuth(_AuthVariant):
    """OCI registry pull credential issued by the API."""

    authentication_type: ClassVar[str] = AUTH_OCI_TOKEN

    credential_lifetime: int


ServiceAccountAuth = KeyAgentAuth | FederatedIssuerAuth | RegistryTokenAuth

AUTH_VARIANTS: dict[str, type[KeyAgentAuth | FederatedIssuerAuth | RegistryTokenAuth]] = {
    AUTH_RSA_KEY: KeyAgentAuth,
    AUTH_RSA_KEY_FEDERATED: FederatedIssuerAuth,
    AUTH_OCI_TOKEN: RegistryTokenAuth,
}
