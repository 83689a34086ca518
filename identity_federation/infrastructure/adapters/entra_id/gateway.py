"""Entra ID directory gateway implementation."""

from __future__ import annotations

import logging
from typing import Any

from ....domain.entities import Application, FederatedIdentityCredential, ServicePrincipal
from ....domain.exceptions import (
    ApplicationNotFoundError,
    FederatedCredentialNotFoundError,
    GraphErrorDecodeError,
    ServicePrincipalNotFoundError,
)
from ....domain.services import (
    display_name_filter,
    first_match,
    raise_for_envelope,
    subject_filter,
)
from .graph_client import GraphClient

logger = logging.getLogger(__name__)


class EntraIdDirectoryGateway:
    """
    Directory gateway implementation using Microsoft Graph API.

    Implements the DirectoryGateway port for Entra ID. Each operation issues
    exactly one Graph call and classifies the response envelope before
    reading any typed field.

    Create operations are not idempotent; use the lookup-or-create helpers
    in the application layer when repeated calls must converge.
    """

    def __init__(self, client: GraphClient) -> None:
        """
        Initialize the gateway.

        Args:
            client: Authenticated Graph API client.
        """
        self._client = client

    async def create_service_principal(
        self, app_id: str, tags: frozenset[str] | set[str] | list[str]
    ) -> ServicePrincipal:
        """
        Create a service principal for the given application.

        No secret or certificate is generated.
        """
        logger.debug("Creating service principal for application %s", app_id)
        body = {"appId": app_id, "tags": sorted(tags)}
        payload = await self._client.post("/servicePrincipals", body)
        raise_for_envelope(payload)
        return self._map_service_principal(payload)

    async def create_application(self, display_name: str) -> Application:
        """Create an application registration."""
        logger.debug("Creating application %s", display_name)
        payload = await self._client.post("/applications", {"displayName": display_name})
        raise_for_envelope(payload)
        return self._map_application(payload)

    async def get_service_principal(self, display_name: str) -> ServicePrincipal:
        """
        Get a service principal by its display name.

        Display names are assumed unique; the first match is returned.

        Raises:
            ServicePrincipalNotFoundError: No service principal has that name.
        """
        logger.debug("Getting service principal %s", display_name)
        values = await self._list(
            "/servicePrincipals", display_name_filter(display_name)
        )
        if not values:
            raise ServicePrincipalNotFoundError(display_name)
        return self._map_service_principal(values[0])

    async def get_application(self, display_name: str) -> Application:
        """
        Get an application by its display name.

        Display names are assumed unique; the first match is returned.

        Raises:
            ApplicationNotFoundError: No application has that name.
        """
        logger.debug("Getting application %s", display_name)
        values = await self._list("/applications", display_name_filter(display_name))
        if not values:
            raise ApplicationNotFoundError(display_name)
        return self._map_application(values[0])

    async def delete_service_principal(self, object_id: str) -> None:
        """Delete a service principal."""
        logger.debug("Deleting service principal %s", object_id)
        raise_for_envelope(await self._client.delete(f"/servicePrincipals/{object_id}"))

    async def delete_application(self, object_id: str) -> None:
        """Delete an application."""
        logger.debug("Deleting application %s", object_id)
        raise_for_envelope(await self._client.delete(f"/applications/{object_id}"))

    async def add_federated_credential(
        self, application_object_id: str, fic: FederatedIdentityCredential
    ) -> FederatedIdentityCredential:
        """Add a federated identity credential to an application."""
        logger.debug(
            "Adding federated credential %s to application %s",
            fic.name,
            application_object_id,
        )
        body: dict[str, Any] = {
            "name": fic.name,
            "issuer": fic.issuer,
            "subject": fic.subject,
            "audiences": list(fic.audiences),
        }
        if fic.description is not None:
            body["description"] = fic.description

        payload = await self._client.post(
            f"/applications/{application_object_id}/federatedIdentityCredentials", body
        )
        raise_for_envelope(payload)
        return self._map_federated_credential(payload)

    async def get_federated_credential(
        self, application_object_id: str, issuer: str, subject: str
    ) -> FederatedIdentityCredential:
        """
        Get a federated identity credential by issuer and subject.

        Graph can filter on only one field, so the subject is filtered
        server-side and the issuer is matched over the returned set.

        Raises:
            FederatedCredentialNotFoundError: No credential matches both fields.
        """
        logger.debug(
            "Getting federated credential on application %s (issuer=%s, subject=%s)",
            application_object_id,
            issuer,
            subject,
        )
        values = await self._list(
            f"/applications/{application_object_id}/federatedIdentityCredentials",
            subject_filter(subject),
        )
        credentials = (self._map_federated_credential(value) for value in values)
        match = first_match(credentials, lambda fic: fic.matches(issuer, subject))
        if match is None:
            raise FederatedCredentialNotFoundError(application_object_id, issuer, subject)
        return match

    async def delete_federated_credential(
        self, application_object_id: str, federated_credential_id: str
    ) -> None:
        """Delete a federated identity credential from an application."""
        logger.debug(
            "Deleting federated credential %s from application %s",
            federated_credential_id,
            application_object_id,
        )
        payload = await self._client.delete(
            f"/applications/{application_object_id}"
            f"/federatedIdentityCredentials/{federated_credential_id}"
        )
        raise_for_envelope(payload)

    async def _list(self, path: str, odata_filter: str) -> list[dict[str, Any]]:
        """Run a filtered collection query and return its classified values."""
        payload = await self._client.get(path, params={"$filter": odata_filter})
        raise_for_envelope(payload)

        values = payload.get("value")
        if not isinstance(values, list):
            msg = f"GET {path} response has no 'value' array"
            raise GraphErrorDecodeError(msg)
        if not all(isinstance(value, dict) for value in values):
            msg = f"GET {path} response has a non-object item in 'value'"
            raise GraphErrorDecodeError(msg)
        return values

    @staticmethod
    def _object_id(raw: dict[str, Any]) -> str:
        """Read the directory-assigned id that later deletes are keyed on."""
        object_id = raw.get("id")
        if not isinstance(object_id, str) or not object_id:
            msg = "Graph object has no 'id'"
            raise GraphErrorDecodeError(msg)
        return object_id

    @classmethod
    def _map_application(cls, raw: dict[str, Any]) -> Application:
        """Map raw Graph API application data to domain entity."""
        return Application(
            object_id=cls._object_id(raw),
            app_id=raw.get("appId", ""),
            display_name=raw.get("displayName", ""),
        )

    @classmethod
    def _map_service_principal(cls, raw: dict[str, Any]) -> ServicePrincipal:
        """Map raw Graph API service principal data to domain entity."""
        return ServicePrincipal(
            object_id=cls._object_id(raw),
            app_id=raw.get("appId", ""),
            display_name=raw.get("displayName") or "",
            tags=frozenset(raw.get("tags") or ()),
        )

    @classmethod
    def _map_federated_credential(cls, raw: dict[str, Any]) -> FederatedIdentityCredential:
        """Map raw Graph API federated credential data to domain entity."""
        return FederatedIdentityCredential(
            name=raw.get("name", ""),
            issuer=raw.get("issuer", ""),
            subject=raw.get("subject", ""),
            audiences=tuple(raw.get("audiences") or ()),
            description=raw.get("description"),
            object_id=cls._object_id(raw),
        )
