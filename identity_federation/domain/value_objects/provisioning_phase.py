"""Provisioning phase value object."""

from enum import StrEnum


class ProvisioningPhase(StrEnum):
    """Directory object touched while provisioning or tearing down an identity."""

    APPLICATION = "application"
    SERVICE_PRINCIPAL = "service-principal"
    FEDERATED_CREDENTIAL = "federated-credential"

    def __str__(self) -> str:
        return self.value
