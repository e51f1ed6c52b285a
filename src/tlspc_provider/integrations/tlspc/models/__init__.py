"""Request/response models for the TLS Protect Cloud APIs."""

from tlspc_provider.integrations.tlspc.models.application import (
    Application,
    ApplicationListResponse,
    OwnerAndType,
    OwnerType,
)
from tlspc_provider.integrations.tlspc.models.base import TLSPCEntity, TLSPCModel
from tlspc_provider.integrations.tlspc.models.ca_product import (
    CAAccount,
    CAAccountListResponse,
    CAProductOption,
    CAProductTemplate,
)
from tlspc_provider.integrations.tlspc.models.certificate_template import (
    CertificateTemplate,
    CertificateTemplateListResponse,
    KeyType,
)
from tlspc_provider.integrations.tlspc.models.cloud_provider import (
    CloudProviderGCP,
    CloudProviderNode,
    GCPProviderConfiguration,
    UnsupportedProviderConfiguration,
)
from tlspc_provider.integrations.tlspc.models.firefly import (
    FireflyConfig,
    FireflyPolicy,
    FireflyPolicySubject,
    FireflySubCAProvider,
    KeyAlgorithm,
    PolicyDetails,
    SANs,
)
from tlspc_provider.integrations.tlspc.models.plugin import Plugin, PluginListResponse
from tlspc_provider.integrations.tlspc.models.service_account import (
    FederatedIssuerAuth,
    KeyAgentAuth,
    RegistryTokenAuth,
    ServiceAccount,
    ServiceAccountAuth,
)
from tlspc_provider.integrations.tlspc.models.team import Team, TeamOwners, UserMatchingRule
from tlspc_provider.integrations.tlspc.models.user import User, UserListResponse

__all__ = [
    "CAAccount",
    "CAAccountListResponse",
    "CAProductOption",
    "CAProductTemplate",
    "Application",
    "ApplicationListResponse",
    "CertificateTemplate",
    "CertificateTemplateListResponse",
    "CloudProviderGCP",
    "CloudProviderNode",
    "FederatedIssuerAuth",
    "FireflyConfig",
    "FireflyPolicy",
    "FireflyPolicySubject",
    "FireflySubCAProvider",
    "GCPProviderConfiguration",
    "KeyAgentAuth",
    "KeyAlgorithm",
    "KeyType",
    "OwnerAndType",
    "OwnerType",
    "Plugin",
    "PluginListResponse",
    "PolicyDetails",
    "RegistryTokenAuth",
    "SANs",
    "ServiceAccount",
    "ServiceAccountAuth",
    "TLSPCEntity",
    "TLSPCModel",
    "Team",
    "TeamOwners",
    "UnsupportedProviderConfiguration",
    "User",
    "UserListResponse",
    "UserMatchingRule",
]
