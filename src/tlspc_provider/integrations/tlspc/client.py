"""TLS Protect Cloud API client."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from tlspc_provider.integrations.tlspc.cloud_providers import CloudProviderClient
from tlspc_provider.integrations.tlspc.exceptions import (
    TLSPCAPIError,
    TLSPCAuthError,
    TLSPCConnectionError,
    TLSPCDecodeError,
    TLSPCNotFoundError,
)
from tlspc_provider.integrations.tlspc.graphql import GraphQLClient
from tlspc_provider.integrations.tlspc.models import (
    Application,
    ApplicationListResponse,
    CAAccount,
    CAAccountListResponse,
    CAProductOption,
    CertificateTemplate,
    CertificateTemplateListResponse,
    FireflyConfig,
    FireflyPolicy,
    FireflySubCAProvider,
    Plugin,
    PluginListResponse,
    ServiceAccount,
    Team,
    TeamOwners,
    TLSPCEntity,
    TLSPCModel,
    User,
    UserListResponse,
)

if TYPE_CHECKING:
    from tlspc_provider.integrations.tlspc.config import TLSPCConfig

logger = structlog.get_logger()

TEAMS = "/v1/teams"
SERVICE_ACCOUNTS = "/v1/serviceaccounts"
PLUGINS = "/v1/plugins"
CERTIFICATE_TEMPLATES = "/v1/certificateissuingtemplates"
APPLICATIONS = "/outagedetection/v1/applications"
FIREFLY_CONFIGS = "/v1/distributedissuers/configurations"
FIREFLY_SUBCA_PROVIDERS = "/v1/distributedissuers/subcaproviders"
FIREFLY_POLICIES = "/v1/distributedissuers/policies"


M = TypeVar("M", bound=TLSPCModel)
E = TypeVar("E", bound=TLSPCEntity)


class TLSPCClient:
    """HTTP client for the TLS Protect Cloud REST API.

    Every write is checked the way the API reports success: create, get
    and most updates must return an entity with a non-empty ``id``; deletes
    and some updates are checked by status code only. Nothing is retried.
    GCP cloud providers live on the GraphQL API and are reached through
    ``cloud_providers``.

    Example:
        ```python
        from tlspc_provider.integrations.tlspc import TLSPCClient, TLSPCConfig

        config = TLSPCConfig.resolve()
        with TLSPCClient(config) as client:
            user = client.get_user("jane@example.com")
            print(user.id)
        ```
    """

    def __init__(self, config: TLSPCConfig) -> None:
        """Initialize TLS Protect Cloud client.

        Args:
            config: Provider configuration with API key and endpoint.
        """
        self.config = config
        self._client = httpx.Client(
            base_url=config.endpoint,
            timeout=httpx.Timeout(config.timeout),
            headers=config.headers(),
        )
        self.graphql = GraphQLClient(config)
        self.cloud_providers = CloudProviderClient(self.graphql)
        logger.info(
            "TLSPC client initialized",
            endpoint=config.endpoint,
            user_agent=config.user_agent,
        )

    def __enter__(self) -> TLSPCClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the HTTP clients."""
        self._client.close()
        self.graphql.close()

    # ------------------------------------------------------------------
    # Transport and response checks
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
    ) -> httpx.Response:
        """Send a request and return the raw response.

        Only transport failures and rejected credentials raise here; every
        operation decides for itself which status codes mean success.

        Raises:
            TLSPCConnectionError: On connection failure or timeout.
            TLSPCAuthError: On 401/403.
        """
        logger.debug("TLSPC request", method=method, path=path)
        try:
            response = self._client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.error("TLSPC timeout", method=method, path=path, error=str(e))
            raise TLSPCConnectionError(
                "Request to TLS Protect Cloud API timed out", details=str(e)
            ) from e
        except httpx.TransportError as e:
            logger.error("TLSPC connection error", method=method, path=path, error=str(e))
            raise TLSPCConnectionError(
                f"Failed to connect to TLS Protect Cloud API: {e}", details=str(e)
            ) from e

        logger.debug("TLSPC response", method=method, path=path, status=response.status_code)
        if response.status_code == 401:
            raise TLSPCAuthError(
                "Invalid TLS Protect Cloud API key",
                status_code=401,
                response_body=response.text,
                endpoint=path,
            )
        if response.status_code == 403:
            raise TLSPCAuthError(
                "Access denied",
                status_code=403,
                response_body=response.text,
                endpoint=path,
            )
        return response

    @staticmethod
    def _decode(response: httpx.Response, model: type[M], path: str) -> M:
        """Decode a JSON object body into a model, keeping the raw body on failure."""
        body = response.text
        try:
            data = response.json()
        except ValueError as e:
            raise TLSPCDecodeError(
                "Error decoding response",
                status_code=response.status_code,
                response_body=body,
                endpoint=path,
            ) from e
        if not isinstance(data, dict):
            raise TLSPCDecodeError(
                "Error decoding response",
                status_code=response.status_code,
                response_body=body,
                endpoint=path,
            )
        try:
            return model.from_api_response(data)
        except ValidationError as e:
            raise TLSPCDecodeError(
                f"Error decoding response: {e.error_count()} invalid field(s)",
                status_code=response.status_code,
                response_body=body,
                endpoint=path,
            ) from e

    @staticmethod
    def _expect_status(
        response: httpx.Response,
        accepted: Iterable[int],
        message: str,
        path: str,
    ) -> None:
        if response.status_code not in accepted:
            raise TLSPCAPIError(
                message,
                status_code=response.status_code,
                response_body=response.text,
                endpoint=path,
            )

    @staticmethod
    def _require_id(
        entity: E, response: httpx.Response, message: str, path: str
    ) -> E:
        if not entity.has_id:
            raise TLSPCAPIError(
                message,
                status_code=response.status_code,
                response_body=response.text,
                endpoint=path,
            )
        return entity

    @staticmethod
    def _single(
        items: list[E], response: httpx.Response, kind: str, path: str
    ) -> E:
        """Unwrap a create envelope that must hold exactly one entity."""
        if len(items) != 1:
            raise TLSPCAPIError(
                f"Unexpected number of {kind}s returned ({len(items)})",
                status_code=response.status_code,
                response_body=response.text,
                endpoint=path,
            )
        return items[0]

    def _create(self, path: str, entity: E) -> E:
        model = type(entity)
        response = self._request("POST", path, json=entity.to_create_payload())
        created = self._decode(response, model, path)
        return self._require_id(created, response, f"Didn't create a {model._entity_name}", path)

    def _get(self, path: str, model: type[E]) -> E:
        response = self._request("GET", path)
        if response.status_code == 404:
            raise TLSPCNotFoundError(
                f"No such {model._entity_name}",
                status_code=404,
                response_body=response.text,
                endpoint=path,
            )
        entity = self._decode(response, model, path)
        return self._require_id(entity, response, f"Didn't find a {model._entity_name}", path)

    def _update(
        self,
        method: str,
        path: str,
        entity: E,
        accepted: Iterable[int],
    ) -> E:
        """Send an update and decode the returned entity."""
        model = type(entity)
        response = self._request(method, path, json=entity.to_update_payload())
        self._expect_status(response, accepted, f"Failed to update {model._entity_name}", path)
        return self._decode(response, model, path)

    def _delete(self, path: str, accepted: Iterable[int], kind: str) -> None:
        response = self._request("DELETE", path)
        self._expect_status(response, accepted, f"Failed to delete {kind}", path)

    @staticmethod
    def _entity_path(collection: str, entity_id: str | None) -> str:
        if not entity_id:
            raise TLSPCAPIError("Empty ID", endpoint=collection)
        return f"{collection}/{entity_id}"

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, email: str) -> User:
        """Look up a user by email address.

        Args:
            email: The user's email (their username).

        Returns:
            The single matching user.

        Raises:
            TLSPCAPIError: If the lookup does not return exactly one user.
        """
        path = f"/v1/users/username/{email}"
        logger.debug("Getting user", email=email)
        response = self._request("GET", path)
        users = self._decode(response, UserListResponse, path).users
        if len(users) != 1:
            raise TLSPCAPIError(
                f"Unexpected number of users returned ({len(users)})",
                status_code=response.status_code,
                response_body=response.text,
                endpoint=path,
            )
        return users[0]

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def create_team(self, team: Team) -> Team:
        """Create a team.

        Args:
            team: Team to create.

        Returns:
            The created team.
        """
        logger.info("Creating team", name=team.name)
        created = self._create(TEAMS, team)
        logger.info("Created team", id=created.id)
        return created

    def get_team(self, team_id: str) -> Team:
        """Get a team by ID."""
        return self._get(self._entity_path(TEAMS, team_id), Team)

    def update_team(self, team: Team) -> Team:
        """Update a team's name, role and user matching rules.

        Owners are not touched; use add_team_owners/remove_team_owners.

        Raises:
            TLSPCAPIError: Unless the API answers 200 with the team.
        """
        path = self._entity_path(TEAMS, team.id)
        logger.info("Updating team", id=team.id)
        response = self._request("PATCH", path, json=team.to_update_payload())
        self._expect_status(response, (200,), "Failed to update team", path)
        updated = self._decode(response, Team, path)
        return self._require_id(updated, response, "Didn't get a team ID", path)

    def _owners_call(self, method: str, team_id: str, owners: list[str]) -> Team:
        path = self._entity_path(TEAMS, team_id) + "/owners"
        response = self._request(method, path, json=TeamOwners(owners=owners).to_payload())
        team = self._decode(response, Team, path)
        return self._require_id(team, response, "Didn't get a team ID", path)

    def add_team_owners(self, team_id: str, owners: list[str]) -> Team:
        """Add owners to a team in one call.

        Args:
            team_id: Team ID.
            owners: User IDs to add.

        Returns:
            The team after the change.
        """
        logger.info("Adding team owners", id=team_id, count=len(owners))
        return self._owners_call("POST", team_id, owners)

    def remove_team_owners(self, team_id: str, owners: list[str]) -> Team:
        """Remove owners from a team in one call.

        Args:
            team_id: Team ID.
            owners: User IDs to remove.

        Returns:
            The team after the change.
        """
        logger.info("Removing team owners", id=team_id, count=len(owners))
        return self._owners_call("DELETE", team_id, owners)

    def delete_team(self, team_id: str) -> None:
        """Delete a team.

        The API is documented to answer 204 but answers 200; both are success.
        """
        logger.info("Deleting team", id=team_id)
        self._delete(self._entity_path(TEAMS, team_id), (200, 204), "team")

    # ------------------------------------------------------------------
    # Service accounts
    # ------------------------------------------------------------------

    def create_service_account(self, account: ServiceAccount) -> ServiceAccount:
        """Create a service account of any authentication type."""
        logger.info(
            "Creating service account",
            name=account.name,
            authentication_type=account.authentication_type,
        )
        created = self._create(SERVICE_ACCOUNTS, account)
        logger.info("Created service account", id=created.id)
        return created

    def get_service_account(self, account_id: str) -> ServiceAccount:
        """Get a service account by ID."""
        return self._get(self._entity_path(SERVICE_ACCOUNTS, account_id), ServiceAccount)

    def update_service_account(self, account: ServiceAccount) -> None:
        """Update a service account; the API answers 204 with no body."""
        path = self._entity_path(SERVICE_ACCOUNTS, account.id)
        logger.info("Updating service account", id=account.id)
        response = self._request("PATCH", path, json=account.to_update_payload())
        self._expect_status(response, (204,), "Failed to update service account", path)

    def delete_service_account(self, account_id: str) -> None:
        """Delete a service account."""
        logger.info("Deleting service account", id=account_id)
        self._delete(self._entity_path(SERVICE_ACCOUNTS, account_id), (204,), "service account")

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    def create_plugin(self, plugin: Plugin) -> Plugin:
        """Create a plugin; the API wraps the result in a ``plugins`` list."""
        logger.info("Creating plugin", plugin_type=plugin.plugin_type)
        response = self._request("POST", PLUGINS, json=plugin.to_create_payload())
        plugins = self._decode(response, PluginListResponse, PLUGINS).plugins
        created = self._single(plugins, response, "plugin", PLUGINS)
        return self._require_id(created, response, "Didn't create a plugin", PLUGINS)

    def get_plugin(self, plugin_id: str) -> Plugin:
        """Get a plugin by ID."""
        return self._get(self._entity_path(PLUGINS, plugin_id), Plugin)

    def update_plugin(self, plugin: Plugin) -> None:
        """Update a plugin's type and manifest."""
        path = self._entity_path(PLUGINS, plugin.id)
        logger.info("Updating plugin", id=plugin.id)
        response = self._request("PATCH", path, json=plugin.to_update_payload())
        self._expect_status(response, (200,), "Failed to update plugin", path)

    def delete_plugin(self, plugin_id: str) -> None:
        """Delete a plugin."""
        logger.info("Deleting plugin", id=plugin_id)
        self._delete(self._entity_path(PLUGINS, plugin_id), (204,), "plugin")

    # ------------------------------------------------------------------
    # CA products
    # ------------------------------------------------------------------

    def _list_ca_accounts(self, kind: str) -> CAAccountListResponse:
        path = f"/v1/certificateauthorities/{kind}/accounts"
        response = self._request("GET", path)
        return self._decode(response, CAAccountListResponse, path)

    def get_ca_product_option(
        self, kind: str, ca_name: str, option: str
    ) -> tuple[CAProductOption, CAAccount]:
        """Find a CA product option by account name and option name.

        Args:
            kind: CA type (e.g. BUILTIN, DIGICERT).
            ca_name: CA account name.
            option: Product option name.

        Returns:
            Tuple of (product option, owning CA account).

        Raises:
            TLSPCNotFoundError: If no account/option pair matches.
        """
        for entry in self._list_ca_accounts(kind).accounts:
            if entry.account.name != ca_name:
                continue
            for product_option in entry.product_options:
                if product_option.name == option:
                    return product_option, entry.account
        raise TLSPCNotFoundError(
            "Specified CA product option not found.",
            endpoint=f"/v1/certificateauthorities/{kind}/accounts",
        )

    def get_ca_product_option_by_id(self, kind: str, option_id: str) -> CAProductOption:
        """Find a CA product option by ID across every account of a CA type.

        Raises:
            TLSPCNotFoundError: If no option has this ID.
        """
        for entry in self._list_ca_accounts(kind).accounts:
            for product_option in entry.product_options:
                if product_option.id == option_id:
                    return product_option
        raise TLSPCNotFoundError(
            "Specified CA product option not found.",
            endpoint=f"/v1/certificateauthorities/{kind}/accounts",
        )

    # ------------------------------------------------------------------
    # Certificate templates
    # ------------------------------------------------------------------

    def create_certificate_template(self, template: CertificateTemplate) -> CertificateTemplate:
        """Create a certificate issuing template."""
        logger.info("Creating certificate template", name=template.name)
        path = CERTIFICATE_TEMPLATES
        response = self._request("POST", path, json=template.to_create_payload())
        templates = self._decode(response, CertificateTemplateListResponse, path).templates
        created = self._single(templates, response, "template", path)
        return self._require_id(created, response, "Didn't create a template", path)

    def get_certificate_template(self, template_id: str) -> CertificateTemplate:
        """Get a certificate issuing template by ID."""
        return self._get(
            self._entity_path(CERTIFICATE_TEMPLATES, template_id), CertificateTemplate
        )

    def list_certificate_templates(self) -> list[CertificateTemplate]:
        """List every certificate issuing template of the tenant."""
        response = self._request("GET", CERTIFICATE_TEMPLATES)
        self._expect_status(
            response, (200,), "Failed to list certificate templates", CERTIFICATE_TEMPLATES
        )
        templates = self._decode(
            response, CertificateTemplateListResponse, CERTIFICATE_TEMPLATES
        ).templates
        logger.debug("Listed certificate templates", count=len(templates))
        return templates

    def update_certificate_template(self, template: CertificateTemplate) -> CertificateTemplate:
        """Replace a certificate issuing template (PUT)."""
        path = self._entity_path(CERTIFICATE_TEMPLATES, template.id)
        logger.info("Updating certificate template", id=template.id)
        return self._update("PUT", path, template, accepted=(200, 202))

    def delete_certificate_template(self, template_id: str) -> None:
        """Delete a certificate issuing template."""
        logger.info("Deleting certificate template", id=template_id)
        self._delete(
            self._entity_path(CERTIFICATE_TEMPLATES, template_id), (204,), "certificate template"
        )

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    def create_application(self, application: Application) -> Application:
        """Create an application."""
        logger.info("Creating application", name=application.name)
        path = APPLICATIONS
        response = self._request("POST", path, json=application.to_create_payload())
        applications = self._decode(response, ApplicationListResponse, path).applications
        created = self._single(applications, response, "application", path)
        return self._require_id(created, response, "Didn't create an application", path)

    def get_application(self, application_id: str) -> Application:
        """Get an application by ID."""
        return self._get(self._entity_path(APPLICATIONS, application_id), Application)

    def update_application(self, application: Application) -> Application:
        """Replace an application (PUT)."""
        path = self._entity_path(APPLICATIONS, application.id)
        logger.info("Updating application", id=application.id)
        return self._update("PUT", path, application, accepted=(200, 202))

    def delete_application(self, application_id: str) -> None:
        """Delete an application; success is 200."""
        logger.info("Deleting application", id=application_id)
        self._delete(self._entity_path(APPLICATIONS, application_id), (200,), "application")

    # ------------------------------------------------------------------
    # Firefly
    # ------------------------------------------------------------------

    def create_firefly_config(self, config: FireflyConfig) -> FireflyConfig:
        """Create a Firefly configuration."""
        logger.info("Creating Firefly config", name=config.name)
        return self._create(FIREFLY_CONFIGS, config)

    def get_firefly_config(self, config_id: str) -> FireflyConfig:
        """Get a Firefly configuration by ID."""
        return self._get(self._entity_path(FIREFLY_CONFIGS, config_id), FireflyConfig)

    def update_firefly_config(self, config: FireflyConfig) -> FireflyConfig:
        """Update a Firefly configuration."""
        path = self._entity_path(FIREFLY_CONFIGS, config.id)
        logger.info("Updating Firefly config", id=config.id)
        return self._update("PATCH", path, config, accepted=(200, 202))

    def delete_firefly_config(self, config_id: str) -> None:
        """Delete a Firefly configuration."""
        logger.info("Deleting Firefly config", id=config_id)
        self._delete(self._entity_path(FIREFLY_CONFIGS, config_id), (200,), "Firefly config")

    def create_firefly_subca_provider(
        self, provider: FireflySubCAProvider
    ) -> FireflySubCAProvider:
        """Create a Firefly sub CA provider."""
        logger.info("Creating Firefly sub CA provider", name=provider.name)
        return self._create(FIREFLY_SUBCA_PROVIDERS, provider)

    def get_firefly_subca_provider(self, provider_id: str) -> FireflySubCAProvider:
        """Get a Firefly sub CA provider by ID."""
        return self._get(
            self._entity_path(FIREFLY_SUBCA_PROVIDERS, provider_id), FireflySubCAProvider
        )

    def update_firefly_subca_provider(
        self, provider: FireflySubCAProvider
    ) -> FireflySubCAProvider:
        """Update a Firefly sub CA provider."""
        path = self._entity_path(FIREFLY_SUBCA_PROVIDERS, provider.id)
        logger.info("Updating Firefly sub CA provider", id=provider.id)
        return self._update("PATCH", path, provider, accepted=(200, 202))

    def delete_firefly_subca_provider(self, provider_id: str) -> None:
        """Delete a Firefly sub CA provider."""
        logger.info("Deleting Firefly sub CA provider", id=provider_id)
        self._delete(
            self._entity_path(FIREFLY_SUBCA_PROVIDERS, provider_id),
            (200,),
            "Firefly sub CA provider",
        )

    def create_firefly_policy(self, policy: FireflyPolicy) -> FireflyPolicy:
        """Create a Firefly policy."""
        logger.info("Creating Firefly policy", name=policy.name)
        return self._create(FIREFLY_POLICIES, policy)

    def get_firefly_policy(self, policy_id: str) -> FireflyPolicy:
        """Get a Firefly policy by ID."""
        return self._get(self._entity_path(FIREFLY_POLICIES, policy_id), FireflyPolicy)

    def update_firefly_policy(self, policy: FireflyPolicy) -> FireflyPolicy:
        """Update a Firefly policy."""
        path = self._entity_path(FIREFLY_POLICIES, policy.id)
        logger.info("Updating Firefly policy", id=policy.id)
        return self._update("PATCH", path, policy, accepted=(200, 202))

    def delete_firefly_policy(self, policy_id: str) -> None:
        """Delete a Firefly policy."""
        logger.info("Deleting Firefly policy", id=policy_id)
        self._delete(self._entity_path(FIREFLY_POLICIES, policy_id), (200,), "Firefly policy")
