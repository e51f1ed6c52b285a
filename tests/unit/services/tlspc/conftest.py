"""Shared fixtures for reconciler tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def mock_tlspc_client() -> MagicMock:
    """Create a mock TLSPCClient."""
    return MagicMock()
