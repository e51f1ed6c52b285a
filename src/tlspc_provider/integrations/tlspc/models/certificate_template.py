"""Pydantic models for certificate issuing templates."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from tlspc_provider.integrations.tlspc.models.base import TLSPCEntity, TLSPCModel
from tlspc_provider.integrations.tlspc.models.ca_product import CAProductTemplate


class KeyType(TLSPCModel):
    """Key algorithm allowed by a template."""

    key_type: str = Field(..., description="RSA or EC")
    key_lengths: list[int] | None = Field(default=None, description="Allowed RSA key sizes")
    key_curves: list[str] | None = Field(default=None, description="Allowed EC curves")


class CertificateTemplate(TLSPCEntity):
    """Certificate issuing template.

    Subject and SAN constraints are regular expressions; templates managed
    here allow everything and leave restriction to Firefly policies.
    """

    _entity_name: ClassVar[str] = "certificate template"

    name: str = Field(default="", description="Template name")
    certificate_authority: str = Field(default="", description="CA type")
    certificate_authority_product_option_id: str = Field(
        default="", description="CA product option ID"
    )
    key_reuse: bool = Field(default=False, description="Allow private key reuse")
    key_types: list[KeyType] = Field(default_factory=list, description="Allowed key types")
    product: CAProductTemplate = Field(default_factory=CAProductTemplate)
    san_regexes: list[str] = Field(default_factory=list)
    subject_cn_regexes: list[str] = Field(default_factory=list, alias="subjectCNRegexes")
    subject_c_values: list[str] = Field(default_factory=list)
    subject_l_regexes: list[str] = Field(default_factory=list)
    subject_o_regexes: list[str] = Field(default_factory=list)
    subject_ou_regexes: list[str] = Field(default_factory=list, alias="subjectOURegexes")
    subject_st_regexes: list[str] = Field(default_factory=list, alias="subjectSTRegexes")


class CertificateTemplateListResponse(TLSPCModel):
    """Envelope returned by template creation and listing."""

    templates: list[CertificateTemplate] = Field(
        default_factory=list, alias="certificateIssuingTemplates"
    )
