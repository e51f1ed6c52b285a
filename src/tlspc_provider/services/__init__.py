"""Reconcilers and lookups for TLS Protect Cloud resources."""

from tlspc_provider.services.application_reconciler import ApplicationReconciler
from tlspc_provider.services.base import (
    BaseReconciler,
    DeclaredType,
    EntityReconciler,
    EntityState,
    ResourceState,
)
from tlspc_provider.services.certificate_template_reconciler import (
    CertificateTemplateReconciler,
)
from tlspc_provider.services.cloud_provider_reconciler import (
    CloudProviderGCPReconciler,
    CloudProviderGCPValidateReconciler,
)
from tlspc_provider.services.firefly_reconciler import (
    FireflyConfigReconciler,
    FireflyPolicyReconciler,
    FireflySubCAReconciler,
)
from tlspc_provider.services.lookups import (
    BaseLookup,
    CAProductLookup,
    CertificateTemplateLookup,
    UserLookup,
)
from tlspc_provider.services.plugin_reconciler import PluginReconciler
from tlspc_provider.services.registry_account_reconciler import RegistryAccountReconciler
from tlspc_provider.services.service_account_reconciler import ServiceAccountReconciler
from tlspc_provider.services.team_reconciler import TeamReconciler

__all__ = [
    "ApplicationReconciler",
    "BaseLookup",
    "BaseReconciler",
    "CAProductLookup",
    "CertificateTemplateLookup",
    "CertificateTemplateReconciler",
    "CloudProviderGCPReconciler",
    "CloudProviderGCPValidateReconciler",
    "DeclaredType",
    "EntityReconciler",
    "EntityState",
    "FireflyConfigReconciler",
    "FireflyPolicyReconciler",
    "FireflySubCAReconciler",
    "PluginReconciler",
    "RegistryAccountReconciler",
    "ResourceState",
    "ServiceAccountReconciler",
    "TeamReconciler",
    "UserLookup",
]
