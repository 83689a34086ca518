"""Port for the directory gateway - driven/secondary port."""

from typing import Protocol

from ...domain.entities import Application, FederatedIdentityCredential, ServicePrincipal


class DirectoryGateway(Protocol):
    """
    Port for managing workload identity objects in a directory service.

    This is a driven (secondary) port. Every operation is a single
    request/response call; cancelling the awaiting task aborts it.

    Raises (all operations):
        TransportError: The call failed at the network, auth or timeout level.
        DirectoryServiceError: The response carried a service error object.
        GraphErrorDecodeError: The response envelope could not be decoded.
    """

    async def create_service_principal(
        self, app_id: str, tags: frozenset[str] | set[str] | list[str]
    ) -> ServicePrincipal:
        """Create a service principal bound to ``app_id``. Not idempotent."""
        ...

    async def create_application(self, display_name: str) -> Application:
        """Create an application registration. Not idempotent."""
        ...

    async def get_service_principal(self, display_name: str) -> ServicePrincipal:
        """
        Get the first service principal with the given display name.

        Raises:
            ServicePrincipalNotFoundError: Nothing matched.
        """
        ...

    async def get_application(self, display_name: str) -> Application:
        """
        Get the first application with the given display name.

        Raises:
            ApplicationNotFoundError: Nothing matched.
        """
        ...

    async def delete_service_principal(self, object_id: str) -> None:
        """Delete a service principal by object id."""
        ...

    async def delete_application(self, object_id: str) -> None:
        """Delete an application by object id."""
        ...

    async def add_federated_credential(
        self, application_object_id: str, fic: FederatedIdentityCredential
    ) -> FederatedIdentityCredential:
        """Attach a federated credential to an application. Not idempotent."""
        ...

    async def get_federated_credential(
        self, application_object_id: str, issuer: str, subject: str
    ) -> FederatedIdentityCredential:
        """
        Get the federated credential matching both issuer and subject.

        Raises:
            FederatedCredentialNotFoundError: Nothing matched both fields.
        """
        ...

    async def delete_federated_credential(
        self, application_object_id: str, federated_credential_id: str
    ) -> None:
        """Delete a federated credential by its object id."""
        ...
