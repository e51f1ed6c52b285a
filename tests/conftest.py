"""Shared pytest fixtures for tlspc_provider tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import typer
from pydantic import SecretStr
from typer.testing import CliRunner

from tlspc_provider.cli.main import app
from tlspc_provider.integrations.tlspc.config import TLSPCConfig

BASE_URL = "https://api.test.venafi.cloud"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate every test from the caller's credentials and config file."""
    for key in list(os.environ.keys()):
        if key.startswith("TLSPC_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))


@pytest.fixture
def tlspc_config() -> TLSPCConfig:
    """Create a test provider config."""
    return TLSPCConfig(api_key=SecretStr("test-api-key"), endpoint=BASE_URL, version="1.2.3")
