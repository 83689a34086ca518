"""Domain entities - Directory objects with server-assigned identity."""

from .application import Application
from .federated_credential import FederatedIdentityCredential
from .service_principal import ServicePrincipal

__all__ = [
    "Application",
    "FederatedIdentityCredential",
    "ServicePrincipal",
]
