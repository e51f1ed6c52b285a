"""Unit tests for TLS Protect Cloud configuration."""

from __future__ import annotations

import stat

import pytest
import yaml
from pydantic import SecretStr, ValidationError

from tlspc_provider.integrations.tlspc.config import (
    DEFAULT_ENDPOINT,
    ENV_API_KEY,
    ENV_ENDPOINT,
    TLSPCConfig,
)
from tlspc_provider.integrations.tlspc.exceptions import TLSPCConfigError


def _write_config(data: object) -> None:
    path = TLSPCConfig.get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data))


@pytest.mark.unit
class TestTLSPCConfigModel:
    """Tests for field validation and derived values."""

    def test_defaults(self) -> None:
        """Endpoint defaults to the public API."""
        config = TLSPCConfig(api_key=SecretStr("k"))
        assert config.endpoint == DEFAULT_ENDPOINT
        assert config.graphql_url == f"{DEFAULT_ENDPOINT}/graphql"

    def test_endpoint_trailing_slash_stripped(self) -> None:
        """Trailing slashes do not produce double slashes in paths."""
        config = TLSPCConfig(api_key=SecretStr("k"), endpoint="https://api.eu.venafi.cloud/")
        assert config.endpoint == "https://api.eu.venafi.cloud"

    def test_endpoint_requires_scheme(self) -> None:
        """An endpoint without http(s) is rejected."""
        with pytest.raises(ValidationError):
            TLSPCConfig(api_key=SecretStr("k"), endpoint="api.venafi.cloud")

    def test_blank_api_key_rejected(self) -> None:
        """A whitespace-only key is not a key."""
        with pytest.raises(ValidationError):
            TLSPCConfig(api_key=SecretStr("  "))

    def test_headers(self) -> None:
        """Every request carries the key header and the versioned User-Agent."""
        config = TLSPCConfig(api_key=SecretStr("abc"), version="1.2.3")
        headers = config.headers()
        assert headers["tppl-api-key"] == "abc"
        assert headers["User-Agent"] == "terraform-provider-tlspc/1.2.3"
        assert headers["Content-Type"] == "application/json"

    def test_api_key_hidden_in_repr(self) -> None:
        """The key never appears in repr output."""
        config = TLSPCConfig(api_key=SecretStr("super-secret"))
        assert "super-secret" not in repr(config)


@pytest.mark.unit
class TestTLSPCConfigResolve:
    """Tests for resolution priority."""

    def test_arguments_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Declared values override environment and file."""
        monkeypatch.setenv(ENV_API_KEY, "env-key")
        monkeypatch.setenv(ENV_ENDPOINT, "https://env.example.com")
        _write_config({"apikey": "file-key"})

        config = TLSPCConfig.resolve(api_key="arg-key", endpoint="https://arg.example.com")

        assert config.api_key.get_secret_value() == "arg-key"
        assert config.endpoint == "https://arg.example.com"

    def test_environment_over_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables override the config file."""
        monkeypatch.setenv(ENV_API_KEY, "env-key")
        _write_config({"apikey": "file-key", "endpoint": "https://file.example.com"})

        config = TLSPCConfig.resolve()

        assert config.api_key.get_secret_value() == "env-key"
        assert config.endpoint == "https://file.example.com"

    def test_file_fallback(self) -> None:
        """The config file is used when nothing else is set."""
        _write_config({"apikey": "file-key"})
        config = TLSPCConfig.resolve()
        assert config.api_key.get_secret_value() == "file-key"
        assert config.endpoint == DEFAULT_ENDPOINT

    def test_version_stamped(self) -> None:
        """The provider version ends up in the User-Agent."""
        config = TLSPCConfig.resolve(api_key="k", version="9.9.9")
        assert config.user_agent.endswith("/9.9.9")

    def test_missing_key_raises(self) -> None:
        """No key anywhere is a configuration error."""
        with pytest.raises(TLSPCConfigError, match="API key not configured"):
            TLSPCConfig.resolve()

    def test_invalid_endpoint_raises_config_error(self) -> None:
        """Validation failures surface as configuration errors."""
        with pytest.raises(TLSPCConfigError, match="Invalid provider configuration"):
            TLSPCConfig.resolve(api_key="k", endpoint="ftp://nope")

    def test_invalid_yaml_raises(self) -> None:
        """A broken config file is reported."""
        path = TLSPCConfig.get_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("apikey: [unterminated")
        with pytest.raises(TLSPCConfigError, match="Invalid config file format"):
            TLSPCConfig.resolve()

    def test_non_mapping_file_raises(self) -> None:
        """The config file must hold a mapping."""
        _write_config(["a", "b"])
        with pytest.raises(TLSPCConfigError, match="Invalid config file format"):
            TLSPCConfig.resolve()


@pytest.mark.unit
class TestTLSPCConfigSave:
    """Tests for saving credentials."""

    def test_save_round_trip(self) -> None:
        """Saved credentials resolve back and the file is owner-only."""
        TLSPCConfig(api_key=SecretStr("saved"), endpoint="https://api.eu.venafi.cloud").save()

        path = TLSPCConfig.get_config_path()
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert yaml.safe_load(path.read_text()) == {
            "apikey": "saved",
            "endpoint": "https://api.eu.venafi.cloud",
        }
        assert TLSPCConfig.exists()

    def test_default_endpoint_not_written(self) -> None:
        """Only non-default endpoints are persisted."""
        TLSPCConfig(api_key=SecretStr("saved")).save()
        data = yaml.safe_load(TLSPCConfig.get_config_path().read_text())
        assert "endpoint" not in data

    def test_exists_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An environment key counts as configured."""
        assert not TLSPCConfig.exists()
        monkeypatch.setenv(ENV_API_KEY, "k")
        assert TLSPCConfig.exists()
