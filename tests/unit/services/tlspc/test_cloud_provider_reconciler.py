"""Unit tests for the GCP cloud provider reconcilers."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from tlspc_provider.integrations.tlspc.exceptions import (
    TLSPCAPIError,
    TLSPCValidationError,
)
from tlspc_provider.integrations.tlspc.models import CloudProviderGCP
from tlspc_provider.services.cloud_provider_reconciler import (
    CloudProviderGCPReconciler,
    CloudProviderGCPState,
    CloudProviderGCPValidateReconciler,
    CloudProviderGCPValidateState,
)

TEAM_ID = "6f0e9c1e-8d37-4f6b-a3b4-1f2e3d4c5b6a"
PROVIDER_ID = "0b7e2d6c-9f51-4e0a-8c3d-2a1b0c9d8e7f"
ISSUER = f"https://issuer.example.com/{PROVIDER_ID}"


def gcp_config(**attrs: Any) -> dict[str, Any]:
    values: dict[str, Any] = {
        "name": "gcp",
        "team": TEAM_ID,
        "service_account_email": "sa@project.iam.gserviceaccount.com",
        "project_number": 123456789,
        "workload_identity_pool_id": "pool",
        "workload_identity_pool_provider_id": "provider",
    }
    values.update(attrs)
    return values


def remote(**attrs: Any) -> CloudProviderGCP:
    return CloudProviderGCP(id=PROVIDER_ID, issuer_url=ISSUER, **gcp_config(**attrs))


@pytest.mark.unit
class TestCloudProviderGCPReconciler:
    """Tests for the GCP provider lifecycle."""

    def test_create_records_issuer(self, mock_tlspc_client: MagicMock) -> None:
        """The generated issuer URL is stored."""
        mock_tlspc_client.cloud_providers.create_gcp.return_value = remote()
        reconciler = CloudProviderGCPReconciler(mock_tlspc_client)

        state = reconciler.create(reconciler.parse(gcp_config()))

        sent = mock_tlspc_client.cloud_providers.create_gcp.call_args.args[0]
        assert sent.project_number == 123456789
        assert state.id == PROVIDER_ID
        assert state.issuer_url == ISSUER

    def test_team_must_be_uuid(self, mock_tlspc_client: MagicMock) -> None:
        with pytest.raises(TLSPCValidationError):
            CloudProviderGCPReconciler(mock_tlspc_client).parse(gcp_config(team="ops"))

    def test_read(self, mock_tlspc_client: MagicMock) -> None:
        mock_tlspc_client.cloud_providers.get_gcp.return_value = remote(name="renamed")
        reconciler = CloudProviderGCPReconciler(mock_tlspc_client)
        state = reconciler.read(CloudProviderGCPState(id=PROVIDER_ID, **gcp_config()))
        mock_tlspc_client.cloud_providers.get_gcp.assert_called_once_with(PROVIDER_ID)
        assert state.name == "renamed"

    def test_update(self, mock_tlspc_client: MagicMock) -> None:
        """Unchanged plans make no call; changes keep the issuer URL."""
        reconciler = CloudProviderGCPReconciler(mock_tlspc_client)
        state = CloudProviderGCPState(id=PROVIDER_ID, issuer_url=ISSUER, **gcp_config())

        unchanged = reconciler.update(CloudProviderGCPState(**gcp_config()), state)
        mock_tlspc_client.cloud_providers.update_gcp.assert_not_called()
        assert unchanged.issuer_url == ISSUER

        mock_tlspc_client.cloud_providers.update_gcp.return_value = remote(name="renamed")
        updated = reconciler.update(CloudProviderGCPState(**gcp_config(name="renamed")), state)
        sent = mock_tlspc_client.cloud_providers.update_gcp.call_args.args[0]
        assert sent.id == PROVIDER_ID
        assert updated.issuer_url == ISSUER

    def test_delete(self, mock_tlspc_client: MagicMock) -> None:
        CloudProviderGCPReconciler(mock_tlspc_client).delete(
            CloudProviderGCPState(id=PROVIDER_ID, **gcp_config())
        )
        mock_tlspc_client.cloud_providers.delete_gcp.assert_called_once_with(PROVIDER_ID)


@pytest.mark.unit
class TestCloudProviderGCPValidateReconciler:
    """Tests for connection validation."""

    @pytest.fixture
    def reconciler(self, mock_tlspc_client: MagicMock) -> CloudProviderGCPValidateReconciler:
        return CloudProviderGCPValidateReconciler(mock_tlspc_client)

    def _state(self, validate: bool) -> CloudProviderGCPValidateState:
        return CloudProviderGCPValidateState.model_validate(
            {"cloudprovider_id": PROVIDER_ID, "validate": validate}
        )

    def test_declared_name(self, reconciler: CloudProviderGCPValidateReconciler) -> None:
        """The attribute is declared as ``validate``."""
        plan = reconciler.parse({"cloudprovider_id": PROVIDER_ID, "validate": True})
        assert plan.validated is True
        assert "validate" in reconciler.schema()["properties"]

    def test_create_validates(
        self, reconciler: CloudProviderGCPValidateReconciler, mock_tlspc_client: MagicMock
    ) -> None:
        mock_tlspc_client.cloud_providers.validate_gcp.return_value = True
        assert reconciler.create(self._state(True)).validated is True
        mock_tlspc_client.cloud_providers.validate_gcp.assert_called_once_with(PROVIDER_ID)

    def test_create_false_rejected(
        self, reconciler: CloudProviderGCPValidateReconciler, mock_tlspc_client: MagicMock
    ) -> None:
        with pytest.raises(TLSPCValidationError, match="can only be set to true"):
            reconciler.create(self._state(False))
        mock_tlspc_client.cloud_providers.validate_gcp.assert_not_called()

    def test_failed_validation(
        self, reconciler: CloudProviderGCPValidateReconciler, mock_tlspc_client: MagicMock
    ) -> None:
        mock_tlspc_client.cloud_providers.validate_gcp.return_value = False
        with pytest.raises(TLSPCAPIError, match="failed validation"):
            reconciler.create(self._state(True))

    def test_read_status(
        self, reconciler: CloudProviderGCPValidateReconciler, mock_tlspc_client: MagicMock
    ) -> None:
        mock_tlspc_client.cloud_providers.get_gcp_validation.return_value = False
        assert reconciler.read(self._state(True)).validated is False

    def test_read_error_records_false(
        self, reconciler: CloudProviderGCPValidateReconciler, mock_tlspc_client: MagicMock
    ) -> None:
        """A status the API cannot report reads as not validated."""
        mock_tlspc_client.cloud_providers.get_gcp_validation.side_effect = TLSPCAPIError("x")
        assert reconciler.read(self._state(True)).validated is False

    def test_update_cannot_unvalidate(
        self, reconciler: CloudProviderGCPValidateReconciler
    ) -> None:
        with pytest.raises(TLSPCValidationError, match="Can not unvalidate"):
            reconciler.update(self._state(False), self._state(True))

    def test_update_false_to_false(self, reconciler: CloudProviderGCPValidateReconciler) -> None:
        with pytest.raises(TLSPCValidationError, match="can only be set to true"):
            reconciler.update(self._state(False), self._state(False))

    def test_update_revalidates(
        self, reconciler: CloudProviderGCPValidateReconciler, mock_tlspc_client: MagicMock
    ) -> None:
        mock_tlspc_client.cloud_providers.validate_gcp.return_value = True
        assert reconciler.update(self._state(True), self._state(False)).validated is True

    def test_update_failed_validation(
        self, reconciler: CloudProviderGCPValidateReconciler, mock_tlspc_client: MagicMock
    ) -> None:
        """Update fails like create when the vendor does not report VALIDATED."""
        mock_tlspc_client.cloud_providers.validate_gcp.return_value = False
        with pytest.raises(TLSPCAPIError, match="failed validation"):
            reconciler.update(self._state(True), self._state(False))

    def test_delete_is_local(
        self, reconciler: CloudProviderGCPValidateReconciler, mock_tlspc_client: MagicMock
    ) -> None:
        """Deleting makes no API call."""
        reconciler.delete(self._state(True))
        assert mock_tlspc_client.method_calls == []

    def test_import_unsupported(self, reconciler: CloudProviderGCPValidateReconciler) -> None:
        with pytest.raises(TLSPCValidationError, match="does not support import"):
            reconciler.import_state(PROVIDER_ID)
