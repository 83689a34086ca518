"""Use case for provisioning a workload identity."""

import logging
from dataclasses import dataclass

from ...domain.entities import Application, FederatedIdentityCredential, ServicePrincipal
from ...domain.value_objects import ProvisioningPhase, WorkloadIdentityRequest
from ..ports import DirectoryGateway
from .lookup_or_create import (
    ensure_application,
    ensure_federated_credential,
    ensure_service_principal,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProvisionResult:
    """Result of the provisioning use case."""

    application: Application
    service_principal: ServicePrincipal
    federated_credential: FederatedIdentityCredential
    created: frozenset[ProvisioningPhase]

    @property
    def changed(self) -> bool:
        """Check if anything was created."""
        return bool(self.created)


class ProvisionWorkloadIdentity:
    """
    Use case for provisioning an application, its service principal and a
    federated credential for one workload.

    Each phase looks up before creating, so running the use case again
    for the same request creates nothing. Errors other than "not found"
    propagate unchanged.
    """

    def __init__(
        self,
        gateway: DirectoryGateway,
        *,
        default_tags: frozenset[str] = frozenset(),
    ) -> None:
        """
        Initialize the use case.

        Args:
            gateway: Adapter for the directory service.
            default_tags: Tags added to every service principal created.
        """
        self._gateway = gateway
        self._default_tags = default_tags

    async def execute(self, request: WorkloadIdentityRequest) -> ProvisionResult:
        """
        Execute the provisioning use case.

        Returns:
            ProvisionResult with the directory objects and the phases that created something.
        """
        logger.info("Provisioning workload identity %s", request.application_name)
        created: set[ProvisioningPhase] = set()

        application, app_created = await ensure_application(
            self._gateway, request.application_name
        )
        if app_created:
            created.add(ProvisioningPhase.APPLICATION)
        logger.info("Application %s has client ID %s", application.display_name, application.app_id)

        tags = self._default_tags | request.service_principal_tags
        service_principal, sp_created = await ensure_service_principal(
            self._gateway, application, tags
        )
        if sp_created:
            created.add(ProvisioningPhase.SERVICE_PRINCIPAL)

        fic, fic_created = await ensure_federated_credential(
            self._gateway, application, FederatedIdentityCredential.from_request(request)
        )
        if fic_created:
            created.add(ProvisioningPhase.FEDERATED_CREDENTIAL)

        logger.info(
            "Provisioned %s (created: %s)",
            request.application_name,
            ", ".join(sorted(created)) or "nothing",
        )
        return ProvisionResult(
            application=application,
            service_principal=service_principal,
            federated_credential=fic,
            created=frozenset(created),
        )
