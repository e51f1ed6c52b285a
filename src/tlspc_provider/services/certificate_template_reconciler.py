"""Certificate issuing template reconciler.

Templates managed here allow RSA 2048/3072/4096 keys and any subject or
SAN value; restriction is left to Firefly policies. The CA product option
is resolved first so its product definition can be embedded.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from tlspc_provider.integrations.tlspc.exceptions import TLSPCNotFoundError
from tlspc_provider.integrations.tlspc.models import CertificateTemplate, KeyType
from tlspc_provider.services.base import EntityReconciler, EntityState
from tlspc_provider.utils.validators import UUIDStr

RSA_KEY_LENGTHS = [2048, 3072, 4096]
MATCH_ANY = [".*"]


class CertificateTemplateState(EntityState):
    """Declared attributes of ``tlspc_certificate_template``."""

    name: str = Field(..., description="Name")
    ca_type: str = Field(..., description="Type of CA, e.g. BUILTIN or DIGICERT")
    ca_product_id: UUIDStr = Field(..., description="ID of the CA product option")
    key_reuse: bool = Field(default=False, description="Allow private key reuse")


class CertificateTemplateReconciler(
    EntityReconciler[CertificateTemplateState, CertificateTemplate]
):
    """Reconciler for ``tlspc_certificate_template``."""

    type_name: ClassVar[str] = "tlspc_certificate_template"
    state_model = CertificateTemplateState

    def _build(
        self, plan: CertificateTemplateState, template_id: str | None = None
    ) -> CertificateTemplate:
        try:
            option = self._client.get_ca_product_option_by_id(plan.ca_type, plan.ca_product_id)
        except TLSPCNotFoundError as e:
            raise TLSPCNotFoundError(
                f"CA Product ID not found: {plan.ca_product_id}",
                endpoint=e.endpoint,
            ) from e

        return CertificateTemplate(
            id=template_id,
            name=plan.name,
            certificate_authority=plan.ca_type,
            certificate_authority_product_option_id=plan.ca_product_id,
            product=option.details.template,
            key_reuse=plan.key_reuse,
            key_types=[KeyType(key_type="RSA", key_lengths=list(RSA_KEY_LENGTHS))],
            san_regexes=list(MATCH_ANY),
            subject_cn_regexes=list(MATCH_ANY),
            subject_c_values=list(MATCH_ANY),
            subject_l_regexes=list(MATCH_ANY),
            subject_o_regexes=list(MATCH_ANY),
            subject_ou_regexes=list(MATCH_ANY),
            subject_st_regexes=list(MATCH_ANY),
        )

    def create(self, plan: CertificateTemplateState) -> CertificateTemplateState:
        created = self._client.create_certificate_template(self._build(plan))
        self._log.info("created_resource", id=created.id)
        return self._with_id(plan, created.id)

    def _fetch(self, resource_id: str) -> CertificateTemplate:
        return self._client.get_certificate_template(resource_id)

    def _to_state(
        self, remote: CertificateTemplate, previous: CertificateTemplateState | None
    ) -> CertificateTemplateState:
        return CertificateTemplateState(
            id=remote.id,
            name=remote.name,
            ca_type=remote.certificate_authority,
            ca_product_id=remote.certificate_authority_product_option_id,
            key_reuse=remote.key_reuse,
        )

    def update(
        self, plan: CertificateTemplateState, state: CertificateTemplateState
    ) -> CertificateTemplateState:
        if self._unchanged(plan, state, "name", "ca_type", "ca_product_id", "key_reuse"):
            self._log.debug("update_skipped", id=state.id)
            return self._with_id(plan, state.id)
        updated = self._client.update_certificate_template(self._build(plan, state.id))
        self._log.info("updated_resource", id=state.id)
        return self._with_id(plan, updated.id or state.id)

    def delete(self, state: CertificateTemplateState) -> None:
        self._client.delete_certificate_template(state.id or "")
