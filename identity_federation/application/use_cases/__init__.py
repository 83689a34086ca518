"""Application use cases."""

from .lookup_or_create import (
    ensure_application,
    ensure_federated_credential,
    ensure_service_principal,
)
from .provision_workload_identity import ProvisionResult, ProvisionWorkloadIdentity
from .teardown_workload_identity import TeardownResult, TeardownWorkloadIdentity

__all__ = [
    "ProvisionResult",
    "ProvisionWorkloadIdentity",
    "TeardownResult",
    "TeardownWorkloadIdentity",
    "ensure_application",
    "ensure_federated_credential",
    "ensure_service_principal",
]
