"""API request and response models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"]
    version: str
    timestamp: datetime


class WorkloadIdentityRequestModel(BaseModel):
    """Workload identity to provision or tear down."""

    application_name: str = Field(min_length=1, description="Display name of the application")
    issuer: str = Field(min_length=1, description="Token issuer URL to trust")
    subject: str = Field(min_length=1, description="Subject claim to trust")
    audiences: list[str] | None = Field(default=None, description="Accepted audiences")
    credential_name: str | None = Field(default=None, description="Federated credential name")
    service_principal_tags: list[str] = Field(default_factory=list)
    description: str | None = None


class ProvisionResponse(BaseModel):
    """Directory objects backing a provisioned workload identity."""

    application_object_id: str
    application_client_id: str
    service_principal_object_id: str
    federated_credential_object_id: str | None
    created: list[str] = Field(description="Phases that created a directory object")


class TeardownResponse(BaseModel):
    """Result of tearing down a workload identity."""

    deleted: list[str] = Field(description="Phases that deleted a directory object")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: str | None = None
    code: str | None = None
