"""Use case for tearing down a workload identity."""

import logging
from dataclasses import dataclass

from ...domain.exceptions import (
    ApplicationNotFoundError,
    FederatedCredentialNotFoundError,
    ServicePrincipalNotFoundError,
)
from ...domain.value_objects import ProvisioningPhase, WorkloadIdentityRequest
from ..ports import DirectoryGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TeardownResult:
    """Result of the teardown use case."""

    deleted: frozenset[ProvisioningPhase]

    @property
    def changed(self) -> bool:
        """Check if anything was deleted."""
        return bool(self.deleted)


class TeardownWorkloadIdentity:
    """
    Use case for removing a workload identity from the directory.

    Removes the federated credential, then the service principal, then
    the application. Each object is looked up first and skipped when
    absent; the delete calls themselves surface every error.
    """

    def __init__(self, gateway: DirectoryGateway) -> None:
        """Initialize the use case."""
        self._gateway = gateway

    async def execute(self, request: WorkloadIdentityRequest) -> TeardownResult:
        """Execute the teardown use case."""
        logger.info("Tearing down workload identity %s", request.application_name)
        deleted: set[ProvisioningPhase] = set()

        try:
            application = await self._gateway.get_application(request.application_name)
        except ApplicationNotFoundError:
            application = None
            logger.info("Application %s already absent", request.application_name)

        if application is not None:
            try:
                fic = await self._gateway.get_federated_credential(
                    application.object_id, request.issuer, request.subject
                )
            except FederatedCredentialNotFoundError:
                logger.info("Federated credential for %s already absent", request.subject)
            else:
                await self._gateway.delete_federated_credential(
                    application.object_id, fic.object_id
                )
                deleted.add(ProvisioningPhase.FEDERATED_CREDENTIAL)

        try:
            service_principal = await self._gateway.get_service_principal(
                request.application_name
            )
        except ServicePrincipalNotFoundError:
            logger.info("Service principal %s already absent", request.application_name)
        else:
            await self._gateway.delete_service_principal(service_principal.object_id)
            deleted.add(ProvisioningPhase.SERVICE_PRINCIPAL)

        if application is not None:
            await self._gateway.delete_application(application.object_id)
            deleted.add(ProvisioningPhase.APPLICATION)

        logger.info(
            "Tore down %s (deleted: %s)",
            request.application_name,
            ", ".join(sorted(deleted)) or "nothing",
        )
        return TeardownResult(deleted=frozenset(deleted))
