"""Read-only lookups (data sources).

A lookup takes its declared query attributes and fills in the computed
ones from the API. Lookups never write.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, TypeVar

from pydantic import Field

from tlspc_provider.integrations.tlspc.client import CERTIFICATE_TEMPLATES
from tlspc_provider.integrations.tlspc.exceptions import TLSPCNotFoundError
from tlspc_provider.services.base import DeclaredType, ResourceState


S = TypeVar("S", bound=ResourceState)


class BaseLookup(DeclaredType[S], ABC):
    """Abstract base class for data sources."""

    @abstractmethod
    def read(self, query: S) -> S:
        """Resolve the computed attributes."""


class UserLookupState(ResourceState):
    """Attributes of ``tlspc_user``."""

    email: str = Field(..., description="Email address of the user")
    id: str | None = Field(default=None, description="User ID (computed)")


class UserLookup(BaseLookup[UserLookupState]):
    """Find a user's ID by email address."""

    type_name: ClassVar[str] = "tlspc_user"
    state_model = UserLookupState

    def read(self, query: UserLookupState) -> UserLookupState:
        user = self._client.get_user(query.email)
        self._log.debug("resolved_user", id=user.id)
        return query.model_copy(update={"id": user.id})


class CAProductLookupState(ResourceState):
    """Attributes of ``tlspc_ca_product``."""

    type: str = Field(..., description="Type of Certificate Authority, e.g. BUILTIN or DIGICERT")
    ca_name: str = Field(..., description="Name of the Certificate Authority account")
    product_option: str = Field(..., description="Name of the product option")
    id: str | None = Field(default=None, description="Product option ID (computed)")


class CAProductLookup(BaseLookup[CAProductLookupState]):
    """Find a CA product option's ID by CA account and option name."""

    type_name: ClassVar[str] = "tlspc_ca_product"
    state_model = CAProductLookupState

    def read(self, query: CAProductLookupState) -> CAProductLookupState:
        option, account = self._client.get_ca_product_option(
            query.type, query.ca_name, query.product_option
        )
        self._log.debug("resolved_ca_product", id=option.id, account_id=account.id)
        return query.model_copy(update={"id": option.id})


class CertificateTemplateLookupState(ResourceState):
    """Attributes of ``tlspc_certificate_template``."""

    name: str = Field(..., description="Name of the Certificate Issuing Template")
    ca_type: str = Field(
        ...,
        description="Type of Certificate Authority (see Certificate Authority Product Option "
        "data source)",
    )
    id: str | None = Field(default=None, description="Template ID (computed)")
    ca_product_id: str | None = Field(
        default=None, description="The ID of a Certificate Authority Product Option (computed)"
    )
    key_reuse: bool | None = Field(default=None, description="Allow Private Key Reuse (computed)")


class CertificateTemplateLookup(BaseLookup[CertificateTemplateLookupState]):
    """Look up properties of a Certificate Template by name and CA type."""

    type_name: ClassVar[str] = "tlspc_certificate_template"
    state_model = CertificateTemplateLookupState

    def read(self, query: CertificateTemplateLookupState) -> CertificateTemplateLookupState:
        """Scan every template for a name and CA type match.

        Raises:
            TLSPCNotFoundError: If no template matches.
        """
        for template in self._client.list_certificate_templates():
            if template.name == query.name and template.certificate_authority == query.ca_type:
                return query.model_copy(
                    update={
                        "id": template.id,
                        "ca_product_id": template.certificate_authority_product_option_id,
                        "key_reuse": template.key_reuse,
                    }
                )
        raise TLSPCNotFoundError("Certificate Template not found", endpoint=CERTIFICATE_TEMPLATES)
