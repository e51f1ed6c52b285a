"""Certificate authority account and product option models."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from tlspc_provider.integrations.tlspc.models.base import TLSPCEntity, TLSPCModel


class CAProductTemplate(TLSPCModel):
    """Product definition embedded in certificate issuing templates."""

    certificate_authority: str = Field(default="", description="CA type, e.g. BUILTIN")
    product_name: str = Field(default="", description="CA product name")
    product_types: list[str] = Field(default_factory=list, description="Product types")
    validity_period: str = Field(default="", description="ISO 8601 validity period")


class CAProductDetails(TLSPCModel):
    template: CAProductTemplate = Field(
        default_factory=CAProductTemplate, alias="productTemplate"
    )


class CAProductOption(TLSPCEntity):
    """A product option offered by a CA account."""

    _entity_name: ClassVar[str] = "CA product option"

    name: str = Field(default="", alias="productName", description="Product option name")
    details: CAProductDetails = Field(
        default_factory=CAProductDetails, alias="productDetails"
    )


class CAAccount(TLSPCEntity):
    """A configured certificate authority account."""

    _entity_name: ClassVar[str] = "CA account"

    name: str = Field(default="", alias="key", description="Account name")


class CAAccountEntry(TLSPCModel):
    account: CAAccount = Field(default_factory=CAAccount)
    product_options: list[CAProductOption] = Field(default_factory=list)


class CAAccountListResponse(TLSPCModel):
    """Response of the CA accounts endpoint for one CA type."""

    accounts: list[CAAccountEntry] = Field(default_factory=list)
