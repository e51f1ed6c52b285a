"""Pydantic models for Firefly, the distributed issuer.

A Firefly configuration ties together a sub-CA provider, one or more
issuance policies and the service accounts allowed to use them.
"""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import Field

from tlspc_provider.integrations.tlspc.models.base import TLSPCEntity, TLSPCModel

PolicyConstraintType = Literal["IGNORED", "FORBIDDEN", "OPTIONAL", "REQUIRED"]


class PolicyDetails(TLSPCModel):
    """Constraint applied to one subject or SAN field.

    Attributes:
        allowed_values: Literal values or ``^``-prefixed regular expressions.
        default_values: Values filled in when the request omits the field.
        max_occurrences: Maximum number of values.
        min_occurrences: Minimum number of values.
        type: IGNORED, FORBIDDEN, OPTIONAL or REQUIRED.
    """

    allowed_values: list[str] = Field(default_factory=list)
    default_values: list[str] = Field(default_factory=list)
    max_occurrences: int = 0
    min_occurrences: int = 0
    type: str = Field(default="", description="Constraint type")


class KeyAlgorithm(TLSPCModel):
    allowed_values: list[str] = Field(default_factory=list, description="e.g. RSA_2048, EC_P256")
    default_value: str = ""


class SANs(TLSPCModel):
    dns_names: PolicyDetails = Field(default_factory=PolicyDetails)
    ip_addresses: PolicyDetails = Field(default_factory=PolicyDetails)
    rfc822_names: PolicyDetails = Field(default_factory=PolicyDetails, alias="rfc822Names")
    uris: PolicyDetails = Field(default_factory=PolicyDetails, alias="uniformResourceIdentifiers")


class FireflyPolicySubject(TLSPCModel):
    common_name: PolicyDetails = Field(default_factory=PolicyDetails)
    country: PolicyDetails = Field(default_factory=PolicyDetails)
    locality: PolicyDetails = Field(default_factory=PolicyDetails)
    organization: PolicyDetails = Field(default_factory=PolicyDetails)
    organizational_unit: PolicyDetails = Field(default_factory=PolicyDetails)
    state_or_province: PolicyDetails = Field(default_factory=PolicyDetails)


class FireflyPolicy(TLSPCEntity):
    """Issuance policy enforced by Firefly instances."""

    _entity_name: ClassVar[str] = "Firefly policy"

    name: str = Field(default="", description="Policy name")
    extended_key_usages: list[str] = Field(default_factory=list)
    key_algorithm: KeyAlgorithm = Field(default_factory=KeyAlgorithm)
    key_usages: list[str] = Field(default_factory=list)
    sans: SANs = Field(default_factory=SANs)
    subject: FireflyPolicySubject = Field(default_factory=FireflyPolicySubject)
    validity_period: str = Field(default="", description="ISO 8601 period, e.g. P30D")


class FireflySubCAProvider(TLSPCEntity):
    """Intermediate CA that Firefly instances are issued from."""

    _entity_name: ClassVar[str] = "Firefly sub CA provider"

    name: str = ""
    ca_type: str = Field(default="", description="CA type, e.g. BUILTIN")
    ca_account_id: str = ""
    ca_product_option_id: str = ""
    common_name: str = ""
    key_algorithm: str = ""
    validity_period: str = ""


class FireflyConfig(TLSPCEntity):
    """Firefly configuration.

    Requests carry ``policyIds``; responses embed the full ``policies``.
    """

    _entity_name: ClassVar[str] = "Firefly config"

    name: str = ""
    policy_ids: list[str] = Field(default_factory=list)
    policies: list[FireflyPolicy] | None = None
    service_account_ids: list[str] = Field(default_factory=list)
    sub_ca_provider_id: str = ""
    min_tls_version: str = "TLS13"
    cloud_providers: dict[str, Any] = Field(default_factory=dict)

    @property
    def resolved_policy_ids(self) -> list[str]:
        """Policy IDs, taken from embedded policies when the response has them."""
        if self.policies is not None:
            return [p.id for p in self.policies if p.id]
        return list(self.policy_ids)

    def to_create_payload(self) -> dict[str, Any]:
        return self.to_payload(exclude={"id", "policies"})
