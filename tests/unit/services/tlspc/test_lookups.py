"""Unit tests for data source lookups."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from tlspc_provider.integrations.tlspc.exceptions import TLSPCNotFoundError
from tlspc_provider.integrations.tlspc.models import (
    CAAccount,
    CAProductOption,
    CertificateTemplate,
    User,
)
from tlspc_provider.services.lookups import (
    CAProductLookup,
    CertificateTemplateLookup,
    UserLookup,
)


@pytest.mark.unit
class TestUserLookup:
    """Tests for tlspc_user."""

    def test_resolves_id(self, mock_tlspc_client: MagicMock) -> None:
        mock_tlspc_client.get_user.return_value = User(id="u1", username="jane@example.com")
        lookup = UserLookup(mock_tlspc_client)
        result = lookup.read(lookup.parse({"email": "jane@example.com"}))
        mock_tlspc_client.get_user.assert_called_once_with("jane@example.com")
        assert result.id == "u1"


@pytest.mark.unit
class TestCAProductLookup:
    """Tests for tlspc_ca_product."""

    def test_resolves_option_id(self, mock_tlspc_client: MagicMock) -> None:
        mock_tlspc_client.get_ca_product_option.return_value = (
            CAProductOption(id="opt1", name="Default Product"),
            CAAccount(id="acc1", name="Built-In CA"),
        )
        lookup = CAProductLookup(mock_tlspc_client)
        result = lookup.read(
            lookup.parse(
                {"type": "BUILTIN", "ca_name": "Built-In CA", "product_option": "Default Product"}
            )
        )
        mock_tlspc_client.get_ca_product_option.assert_called_once_with(
            "BUILTIN", "Built-In CA", "Default Product"
        )
        assert result.id == "opt1"


@pytest.mark.unit
class TestCertificateTemplateLookup:
    """Tests for tlspc_certificate_template."""

    TEMPLATES = [
        CertificateTemplate(id="t1", name="web", certificate_authority="DIGICERT"),
        CertificateTemplate(
            id="t2",
            name="web",
            certificate_authority="BUILTIN",
            certificate_authority_product_option_id="opt1",
            key_reuse=True,
        ),
        CertificateTemplate(id="t3", name="web", certificate_authority="BUILTIN"),
    ]

    def test_first_match_on_name_and_type(self, mock_tlspc_client: MagicMock) -> None:
        """Name and CA type must both match; the first match wins."""
        mock_tlspc_client.list_certificate_templates.return_value = self.TEMPLATES
        lookup = CertificateTemplateLookup(mock_tlspc_client)
        result = lookup.read(lookup.parse({"name": "web", "ca_type": "BUILTIN"}))
        assert result.id == "t2"
        assert result.ca_product_id == "opt1"
        assert result.key_reuse is True

    def test_not_found(self, mock_tlspc_client: MagicMock) -> None:
        mock_tlspc_client.list_certificate_templates.return_value = self.TEMPLATES
        lookup = CertificateTemplateLookup(mock_tlspc_client)
        with pytest.raises(TLSPCNotFoundError, match="Certificate Template not found"):
            lookup.read(lookup.parse({"name": "api", "ca_type": "BUILTIN"}))
