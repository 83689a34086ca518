"""Domain value objects - Immutable objects defined by their attributes."""

from .graph_error import CLEAN, Clean, EnvelopeStatus, Malformed, ServiceError
from .provisioning_phase import ProvisioningPhase
from .workload_identity import (
    DEFAULT_AUDIENCE,
    WorkloadIdentityRequest,
    credential_name_for,
    service_account_subject,
)

__all__ = [
    "CLEAN",
    "Clean",
    "DEFAULT_AUDIENCE",
    "EnvelopeStatus",
    "Malformed",
    "ProvisioningPhase",
    "ServiceError",
    "WorkloadIdentityRequest",
    "credential_name_for",
    "service_account_subject",
]
