"""
Lookup-or-create operations over the directory gateway.

The directory's create calls are not idempotent: creating the same name
twice yields two objects. These helpers look first and create only on a
confirmed "not found", so repeated calls converge. They take no lock;
concurrent callers racing on the same name can still create duplicates.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.exceptions import (
    ApplicationNotFoundError,
    FederatedCredentialNotFoundError,
    ServicePrincipalNotFoundError,
)

if TYPE_CHECKING:
    from ...domain.entities import Application, FederatedIdentityCredential, ServicePrincipal
    from ..ports import DirectoryGateway

logger = logging.getLogger(__name__)


async def ensure_application(
    gateway: DirectoryGateway, display_name: str
) -> tuple[Application, bool]:
    """
    Get the application with ``display_name`` or create it.

    Returns:
        The application and whether it was created by this call.
    """
    try:
        return await gateway.get_application(display_name), False
    except ApplicationNotFoundError:
        logger.info("Application %s not found, creating it", display_name)
    return await gateway.create_application(display_name), True


async def ensure_service_principal(
    gateway: DirectoryGateway, application: Application, tags: frozenset[str]
) -> tuple[ServicePrincipal, bool]:
    """
    Get the service principal for ``application`` or create it.

    The service principal inherits its display name from the application,
    so the lookup uses the application's display name.
    """
    try:
        return await gateway.get_service_principal(application.display_name), False
    except ServicePrincipalNotFoundError:
        logger.info("Service principal for %s not found, creating it", application.display_name)
    return await gateway.create_service_principal(application.app_id, tags), True


async def ensure_federated_credential(
    gateway: DirectoryGateway, application: Application, fic: FederatedIdentityCredential
) -> tuple[FederatedIdentityCredential, bool]:
    """Get the credential trusting ``fic``'s issuer and subject or add it."""
    try:
        existing = await gateway.get_federated_credential(
            application.object_id, fic.issuer, fic.subject
        )
        return existing, False
    except FederatedCredentialNotFoundError:
        logger.info(
            "Federated credential for subject %s not found on %s, adding it",
            fic.subject,
            application.display_name,
        )
    return await gateway.add_federated_credential(application.object_id, fic), True
