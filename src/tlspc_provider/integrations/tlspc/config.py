"""TLS Protect Cloud provider configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from tlspc_provider.__version__ import __version__
from tlspc_provider.integrations.tlspc.exceptions import TLSPCConfigError

DEFAULT_ENDPOINT = "https://api.venafi.cloud"

ENV_API_KEY = "TLSPC_APIKEY"
ENV_ENDPOINT = "TLSPC_ENDPOINT"


class TLSPCConfig(BaseModel):
    """Connection settings shared by every resource of one provider instance."""

    api_key: SecretStr = Field(..., description="TLS Protect Cloud API key")
    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="API base URL")
    version: str = Field(default=__version__, description="Provider version for the User-Agent")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")

    @field_validator("api_key")
    @classmethod
    def check_api_key(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("API key must not be empty")
        return v

    @field_validator("endpoint")
    @classmethod
    def normalize_endpoint(cls, v: str) -> str:
        """Require an http(s) URL and strip trailing slashes."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("endpoint must start with http:// or https://")
        return v.rstrip("/")

    @property
    def user_agent(self) -> str:
        return f"terraform-provider-tlspc/{self.version}"

    @property
    def graphql_url(self) -> str:
        return f"{self.endpoint}/graphql"

    def headers(self) -> dict[str, str]:
        """Headers sent with every REST and GraphQL request."""
        return {
            "tppl-api-key": self.api_key.get_secret_value(),
            "User-Agent": self.user_agent,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the config file path.

        Returns:
            Path to the config file (~/.config/tlspc/config.yaml).
        """
        return Path.home() / ".config" / "tlspc" / "config.yaml"

    @classmethod
    def _load_file(cls) -> dict[str, Any]:
        config_path = cls.get_config_path()
        if not config_path.exists():
            return {}
        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise TLSPCConfigError("Invalid config file format", details=str(e)) from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise TLSPCConfigError(
                "Invalid config file format",
                details=f"Expected a mapping in {config_path}",
            )
        return data

    @classmethod
    def resolve(
        cls,
        api_key: str | None = None,
        endpoint: str | None = None,
        version: str | None = None,
    ) -> TLSPCConfig:
        """Resolve configuration from arguments, environment and config file.

        Priority:
        1. Explicit arguments (declared provider configuration)
        2. Environment variables (TLSPC_APIKEY, TLSPC_ENDPOINT)
        3. Config file (~/.config/tlspc/config.yaml)

        Args:
            api_key: Declared API key.
            endpoint: Declared API endpoint.
            version: Provider version stamped into the User-Agent.

        Returns:
            Resolved configuration.

        Raises:
            TLSPCConfigError: If no API key is available or a value is invalid.
        """
        file_data = cls._load_file()

        resolved_key = api_key or os.environ.get(ENV_API_KEY) or file_data.get("apikey")
        resolved_endpoint = (
            endpoint
            or os.environ.get(ENV_ENDPOINT)
            or file_data.get("endpoint")
            or DEFAULT_ENDPOINT
        )

        if not resolved_key:
            raise TLSPCConfigError(
                "TLS Protect Cloud API key not configured",
                details=(
                    f"Set the apikey provider attribute, the {ENV_API_KEY} environment "
                    "variable, or run 'tlspc login'"
                ),
            )

        values: dict[str, Any] = {
            "api_key": SecretStr(str(resolved_key)),
            "endpoint": str(resolved_endpoint),
        }
        if version:
            values["version"] = version

        try:
            return cls(**values)
        except ValidationError as e:
            raise TLSPCConfigError("Invalid provider configuration", details=str(e)) from e

    def save(self) -> None:
        """Save API key and endpoint to the config file.

        Creates the config directory if it doesn't exist and restricts the
        file to owner read/write.
        """
        config_path = self.get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data: dict[str, Any] = {"apikey": self.api_key.get_secret_value()}
        if self.endpoint != DEFAULT_ENDPOINT:
            data["endpoint"] = self.endpoint

        with config_path.open("w") as f:
            yaml.safe_dump(data, f, default_flow_style=False)

        config_path.chmod(0o600)

    @classmethod
    def exists(cls) -> bool:
        """Check whether an API key can be found without explicit arguments."""
        if os.environ.get(ENV_API_KEY):
            return True
        return cls.get_config_path().exists()
