"""Firefly reconcilers: sub-CA provider, issuance policy and configuration.

A configuration references a sub-CA provider and policies by ID, so the
host creates providers and policies first.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import ConfigDict, Field

from tlspc_provider.integrations.tlspc.models import (
    FireflyConfig,
    FireflyPolicy,
    FireflyPolicySubject,
    FireflySubCAProvider,
    KeyAlgorithm,
    PolicyDetails,
    SANs,
)
from tlspc_provider.integrations.tlspc.models.firefly import PolicyConstraintType
from tlspc_provider.services.base import EntityReconciler, EntityState, ResourceState
from tlspc_provider.utils.validators import UUIDStr

MIN_TLS_VERSION = "TLS13"

# ---------------------------------------------------------------------------
# Sub-CA provider
# ---------------------------------------------------------------------------


class FireflySubCAState(EntityState):
    """Declared attributes of ``tlspc_firefly_subca``."""

    name: str = Field(..., description="The name of the Firefly Sub CA Provider")
    ca_type: str = Field(..., description="Type of CA, e.g. BUILTIN")
    ca_account_id: UUIDStr = Field(..., description="ID of the CA account")
    ca_product_option_id: UUIDStr = Field(..., description="ID of the CA product option")
    common_name: str = Field(..., description="Common name of the issued sub CA")
    key_algorithm: str = Field(..., description="Key algorithm, e.g. EC_P256")
    validity_period: str = Field(..., description="ISO 8601 period, e.g. P30D")


_SUBCA_FIELDS = (
    "name",
    "ca_type",
    "ca_account_id",
    "ca_product_option_id",
    "common_name",
    "key_algorithm",
    "validity_period",
)


class FireflySubCAReconciler(EntityReconciler[FireflySubCAState, FireflySubCAProvider]):
    """Reconciler for ``tlspc_firefly_subca``."""

    type_name: ClassVar[str] = "tlspc_firefly_subca"
    state_model = FireflySubCAState

    def create(self, plan: FireflySubCAState) -> FireflySubCAState:
        provider = FireflySubCAProvider(**plan.model_dump(include=set(_SUBCA_FIELDS)))
        created = self._client.create_firefly_subca_provider(provider)
        self._log.info("created_resource", id=created.id)
        return self._with_id(plan, created.id)

    def _fetch(self, resource_id: str) -> FireflySubCAProvider:
        return self._client.get_firefly_subca_provider(resource_id)

    def _to_state(
        self, remote: FireflySubCAProvider, previous: FireflySubCAState | None
    ) -> FireflySubCAState:
        return FireflySubCAState(id=remote.id, **remote.model_dump(include=set(_SUBCA_FIELDS)))

    def update(self, plan: FireflySubCAState, state: FireflySubCAState) -> FireflySubCAState:
        if self._unchanged(plan, state, *_SUBCA_FIELDS):
            self._log.debug("update_skipped", id=state.id)
            return self._with_id(plan, state.id)
        provider = FireflySubCAProvider(
            id=state.id, **plan.model_dump(include=set(_SUBCA_FIELDS))
        )
        updated = self._client.update_firefly_subca_provider(provider)
        self._log.info("updated_resource", id=state.id)
        return self._with_id(plan, updated.id or state.id)

    def delete(self, state: FireflySubCAState) -> None:
        self._client.delete_firefly_subca_provider(state.id or "")


# ---------------------------------------------------------------------------
# Issuance policy
# ---------------------------------------------------------------------------


class PolicyConstraint(ResourceState):
    """Constraint on one subject or SAN field."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    allowed_values: frozenset[str] = Field(
        ...,
        description="Literal values or regular expressions; regular expressions start with '^'",
    )
    default_values: frozenset[str] = Field(default=frozenset(), description="Default values")
    max_occurrences: int = Field(..., description="Maximum number of values")
    min_occurrences: int = Field(..., description="Minimum number of values")
    type: PolicyConstraintType = Field(
        ..., description="IGNORED, FORBIDDEN, OPTIONAL or REQUIRED"
    )

    def to_details(self) -> PolicyDetails:
        return PolicyDetails(
            allowed_values=sorted(self.allowed_values),
            default_values=sorted(self.default_values),
            max_occurrences=self.max_occurrences,
            min_occurrences=self.min_occurrences,
            type=self.type,
        )

    @classmethod
    def from_details(cls, details: PolicyDetails) -> PolicyConstraint:
        return cls(
            allowed_values=frozenset(details.allowed_values),
            default_values=frozenset(details.default_values),
            max_occurrences=details.max_occurrences,
            min_occurrences=details.min_occurrences,
            type=details.type,
        )


class KeyAlgorithmState(ResourceState):
    allowed_values: set[str] = Field(
        ..., description="Allowed key algorithms, e.g. RSA_2048, EC_P256, EC_ED25519"
    )
    default_value: str = Field(..., description="Default key algorithm")


class SANsState(ResourceState):
    """Policy for Subject Alternative Names."""

    dns_names: PolicyConstraint
    ip_addresses: PolicyConstraint
    rfc822_names: PolicyConstraint
    uris: PolicyConstraint


class SubjectState(ResourceState):
    """Policy for Subject."""

    common_name: PolicyConstraint
    country: PolicyConstraint
    locality: PolicyConstraint
    organization: PolicyConstraint
    organizational_unit: PolicyConstraint
    state_or_province: PolicyConstraint


_SAN_FIELDS = ("dns_names", "ip_addresses", "rfc822_names", "uris")
_SUBJECT_FIELDS = (
    "common_name",
    "country",
    "locality",
    "organization",
    "organizational_unit",
    "state_or_province",
)


class FireflyPolicyState(EntityState):
    """Declared attributes of ``tlspc_firefly_policy``."""

    name: str = Field(..., description="The name of the Firefly Policy")
    extended_key_usages: set[str] = Field(
        ..., description="Extended key usages, e.g. SERVER_AUTH, CLIENT_AUTH"
    )
    key_usages: set[str] = Field(
        ..., description="Key usages, e.g. digitalSignature, keyEncipherment"
    )
    validity_period: str = Field(
        ..., description="Validity Period in ISO8601 Period Format. e.g. P30D"
    )
    key_algorithm: KeyAlgorithmState
    sans: SANsState | None = None
    subject: SubjectState | None = None


def encode_policy(plan: FireflyPolicyState, policy_id: str | None = None) -> FireflyPolicy:
    """Build the API policy; omitted ``sans``/``subject`` are sent as empty constraints."""
    sans = SANs()
    if plan.sans is not None:
        sans = SANs(**{f: getattr(plan.sans, f).to_details() for f in _SAN_FIELDS})
    subject = FireflyPolicySubject()
    if plan.subject is not None:
        subject = FireflyPolicySubject(
            **{f: getattr(plan.subject, f).to_details() for f in _SUBJECT_FIELDS}
        )
    return FireflyPolicy(
        id=policy_id,
        name=plan.name,
        extended_key_usages=sorted(plan.extended_key_usages),
        key_usages=sorted(plan.key_usages),
        key_algorithm=KeyAlgorithm(
            allowed_values=sorted(plan.key_algorithm.allowed_values),
            default_value=plan.key_algorithm.default_value,
        ),
        sans=sans,
        subject=subject,
        validity_period=plan.validity_period,
    )


def decode_policy(remote: FireflyPolicy) -> FireflyPolicyState:
    """Map an API policy to state; all-empty ``sans``/``subject`` read back as unset."""
    sans = None
    if remote.sans != SANs():
        sans = SANsState(
            **{f: PolicyConstraint.from_details(getattr(remote.sans, f)) for f in _SAN_FIELDS}
        )
    subject = None
    if remote.subject != FireflyPolicySubject():
        subject = SubjectState(
            **{
                f: PolicyConstraint.from_details(getattr(remote.subject, f))
                for f in _SUBJECT_FIELDS
            }
        )
    return FireflyPolicyState(
        id=remote.id,
        name=remote.name,
        extended_key_usages=set(remote.extended_key_usages),
        key_usages=set(remote.key_usages),
        validity_period=remote.validity_period,
        key_algorithm=KeyAlgorithmState(
            allowed_values=set(remote.key_algorithm.allowed_values),
            default_value=remote.key_algorithm.default_value,
        ),
        sans=sans,
        subject=subject,
    )


class FireflyPolicyReconciler(EntityReconciler[FireflyPolicyState, FireflyPolicy]):
    """Reconciler for ``tlspc_firefly_policy``."""

    type_name: ClassVar[str] = "tlspc_firefly_policy"
    state_model = FireflyPolicyState

    def create(self, plan: FireflyPolicyState) -> FireflyPolicyState:
        created = self._client.create_firefly_policy(encode_policy(plan))
        self._log.info("created_resource", id=created.id)
        return self._with_id(plan, created.id)

    def _fetch(self, resource_id: str) -> FireflyPolicy:
        return self._client.get_firefly_policy(resource_id)

    def _to_state(
        self, remote: FireflyPolicy, previous: FireflyPolicyState | None
    ) -> FireflyPolicyState:
        return decode_policy(remote)

    def update(self, plan: FireflyPolicyState, state: FireflyPolicyState) -> FireflyPolicyState:
        if plan.model_dump(exclude={"id"}) == state.model_dump(exclude={"id"}):
            self._log.debug("update_skipped", id=state.id)
            return self._with_id(plan, state.id)
        updated = self._client.update_firefly_policy(encode_policy(plan, state.id))
        self._log.info("updated_resource", id=state.id)
        return self._with_id(plan, updated.id or state.id)

    def delete(self, state: FireflyPolicyState) -> None:
        self._client.delete_firefly_policy(state.id or "")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class FireflyConfigState(EntityState):
    """Declared attributes of ``tlspc_firefly_config``."""

    name: str = Field(..., description="The name of the Firefly Configuration")
    subca_provider: UUIDStr = Field(..., description="The ID of the Firefly SubCA Provider")
    service_accounts: set[UUIDStr] = Field(..., description="A list of service account IDs")
    policies: set[UUIDStr] = Field(..., description="A list of Firefly Issuance Policy IDs")


class FireflyConfigReconciler(EntityReconciler[FireflyConfigState, FireflyConfig]):
    """Reconciler for ``tlspc_firefly_config``."""

    type_name: ClassVar[str] = "tlspc_firefly_config"
    state_model = FireflyConfigState

    @staticmethod
    def _config(plan: FireflyConfigState, config_id: str | None = None) -> FireflyConfig:
        return FireflyConfig(
            id=config_id,
            name=plan.name,
            sub_ca_provider_id=plan.subca_provider,
            policy_ids=sorted(plan.policies),
            service_account_ids=sorted(plan.service_accounts),
            min_tls_version=MIN_TLS_VERSION,
        )

    def create(self, plan: FireflyConfigState) -> FireflyConfigState:
        created = self._client.create_firefly_config(self._config(plan))
        self._log.info("created_resource", id=created.id)
        return self._with_id(plan, created.id)

    def _fetch(self, resource_id: str) -> FireflyConfig:
        return self._client.get_firefly_config(resource_id)

    def _to_state(
        self, remote: FireflyConfig, previous: FireflyConfigState | None
    ) -> FireflyConfigState:
        subca_provider = remote.sub_ca_provider_id
        if not subca_provider and previous is not None:
            subca_provider = previous.subca_provider
        return FireflyConfigState(
            id=remote.id,
            name=remote.name,
            subca_provider=subca_provider,
            service_accounts=set(remote.service_account_ids),
            policies=set(remote.resolved_policy_ids),
        )

    def update(self, plan: FireflyConfigState, state: FireflyConfigState) -> FireflyConfigState:
        if self._unchanged(plan, state, "name", "subca_provider", "service_accounts", "policies"):
            self._log.debug("update_skipped", id=state.id)
            return self._with_id(plan, state.id)
        updated = self._client.update_firefly_config(self._config(plan, state.id))
        self._log.info("updated_resource", id=state.id)
        return self._with_id(plan, updated.id or state.id)

    def delete(self, state: FireflyConfigState) -> None:
        self._client.delete_firefly_config(state.id or "")
