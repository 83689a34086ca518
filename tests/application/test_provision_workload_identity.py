"""Tests for the provisioning use case and lookup-or-create helpers."""

from __future__ import annotations

from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from identity_federation.application.use_cases import (
    ProvisionWorkloadIdentity,
    ensure_application,
    ensure_federated_credential,
    ensure_service_principal,
)
from identity_federation.domain.entities import Application, FederatedIdentityCredential
from identity_federation.domain.exceptions import (
    DirectoryServiceError,
    FederatedCredentialNotFoundError,
    TransportError,
)
from identity_federation.domain.value_objects import ProvisioningPhase, WorkloadIdentityRequest
from identity_federation.infrastructure.adapters.entra_id import EntraIdDirectoryGateway
from tests.conftest import ISSUER, SUBJECT, FakeGraph


class TestEnsureHelpers:
    """Tests for the lookup-or-create helpers."""

    @pytest.mark.asyncio
    async def test_ensure_application_creates_once(
        self, fake_graph: FakeGraph, gateway: EntraIdDirectoryGateway
    ) -> None:
        first, first_created = await ensure_application(gateway, "app")
        second, second_created = await ensure_application(gateway, "app")

        assert first_created is True
        assert second_created is False
        assert second == first
        assert len(fake_graph.applications) == 1

    @pytest.mark.asyncio
    async def test_ensure_service_principal_creates_once(
        self, fake_graph: FakeGraph, gateway: EntraIdDirectoryGateway
    ) -> None:
        app, _ = await ensure_application(gateway, "app")

        sp, created = await ensure_service_principal(gateway, app, frozenset({"x"}))
        again, created_again = await ensure_service_principal(gateway, app, frozenset({"x"}))

        assert created is True
        assert created_again is False
        assert again.object_id == sp.object_id
        assert len(fake_graph.service_principals) == 1

    @pytest.mark.asyncio
    async def test_ensure_federated_credential_creates_once(
        self,
        fake_graph: FakeGraph,
        gateway: EntraIdDirectoryGateway,
        fic: FederatedIdentityCredential,
    ) -> None:
        app, _ = await ensure_application(gateway, "app")

        added, created = await ensure_federated_credential(gateway, app, fic)
        again, created_again = await ensure_federated_credential(gateway, app, fic)

        assert created is True
        assert created_again is False
        assert again.object_id == added.object_id
        assert len(fake_graph.credentials[app.object_id]) == 1

    @pytest.mark.asyncio
    async def test_service_error_on_lookup_never_triggers_create(self) -> None:
        """A real API error must not be mistaken for 'not found'."""
        gateway = AsyncMock()
        gateway.get_application.side_effect = DirectoryServiceError("Authorization_RequestDenied", "denied")

        with pytest.raises(DirectoryServiceError):
            await ensure_application(gateway, "app")

        gateway.create_application.assert_not_called()

    @pytest.mark.asyncio
    async def test_transport_error_on_lookup_never_triggers_create(
        self, fic: FederatedIdentityCredential
    ) -> None:
        gateway = AsyncMock()
        gateway.get_federated_credential.side_effect = TransportError("connection reset")
        app = Application(object_id="obj", app_id="client", display_name="app")

        with pytest.raises(TransportError):
            await ensure_federated_credential(gateway, app, fic)

        gateway.add_federated_credential.assert_not_called()

    @pytest.mark.asyncio
    async def test_fic_lookup_uses_application_object_id(
        self, fic: FederatedIdentityCredential
    ) -> None:
        gateway = AsyncMock()
        gateway.get_federated_credential.side_effect = FederatedCredentialNotFoundError("obj", ISSUER, SUBJECT)
        gateway.add_federated_credential.return_value = replace(fic, object_id="fic-1")
        app = Application(object_id="obj", app_id="client", display_name="app")

        added, created = await ensure_federated_credential(gateway, app, fic)

        gateway.get_federated_credential.assert_awaited_once_with("obj", ISSUER, SUBJECT)
        gateway.add_federated_credential.assert_awaited_once_with("obj", fic)
        assert created is True
        assert added.object_id == "fic-1"


class TestProvisionWorkloadIdentity:
    """Tests for ProvisionWorkloadIdentity."""

    @pytest.mark.asyncio
    async def test_provisions_everything_on_empty_directory(
        self,
        fake_graph: FakeGraph,
        gateway: EntraIdDirectoryGateway,
        workload_request: WorkloadIdentityRequest,
    ) -> None:
        use_case = ProvisionWorkloadIdentity(gateway, default_tags=frozenset({"managed-by:federation"}))

        result = await use_case.execute(workload_request)

        assert result.created == frozenset(ProvisioningPhase)
        assert result.changed is True
        assert result.application.display_name == "workload-app"
        assert result.service_principal.app_id == result.application.app_id
        assert result.service_principal.tags == {"managed-by:federation", "team:payments"}
        assert result.federated_credential.issuer == ISSUER
        assert result.federated_credential.subject == SUBJECT
        assert result.federated_credential.object_id is not None

    @pytest.mark.asyncio
    async def test_second_run_creates_nothing(
        self,
        fake_graph: FakeGraph,
        gateway: EntraIdDirectoryGateway,
        workload_request: WorkloadIdentityRequest,
    ) -> None:
        use_case = ProvisionWorkloadIdentity(gateway)

        first = await use_case.execute(workload_request)
        second = await use_case.execute(workload_request)

        assert second.created == frozenset()
        assert second.changed is False
        assert second.application == first.application
        assert second.federated_credential.object_id == first.federated_credential.object_id
        assert len(fake_graph.applications) == 1
        assert len(fake_graph.service_principals) == 1

    @pytest.mark.asyncio
    async def test_adds_only_missing_credential(
        self,
        fake_graph: FakeGraph,
        gateway: EntraIdDirectoryGateway,
        workload_request: WorkloadIdentityRequest,
    ) -> None:
        use_case = ProvisionWorkloadIdentity(gateway)
        await use_case.execute(workload_request)
        other_subject = WorkloadIdentityRequest(
            application_name=workload_request.application_name,
            issuer=ISSUER,
            subject="system:serviceaccount:default:other-sa",
        )

        result = await use_case.execute(other_subject)

        assert result.created == {ProvisioningPhase.FEDERATED_CREDENTIAL}
        assert len(fake_graph.credentials[result.application.object_id]) == 2

    @pytest.mark.asyncio
    async def test_directory_error_propagates(
        self,
        fake_graph: FakeGraph,
        gateway: EntraIdDirectoryGateway,
        workload_request: WorkloadIdentityRequest,
    ) -> None:
        fake_graph.envelope_error = {"code": "Request_Throttled", "message": "Too many requests"}

        with pytest.raises(DirectoryServiceError, match="Request_Throttled"):
            await ProvisionWorkloadIdentity(gateway).execute(workload_request)

        assert all(request.method == "GET" for request in fake_graph.requests)
