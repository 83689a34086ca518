"""API adapter for HTTP endpoints."""

from .app import create_app
from .models import HealthResponse, ProvisionResponse, TeardownResponse, WorkloadIdentityRequestModel

__all__ = [
    "HealthResponse",
    "ProvisionResponse",
    "TeardownResponse",
    "WorkloadIdentityRequestModel",
    "create_app",
]
