"""Federated identity credential entity."""

from __future__ import annotations

from dataclasses import dataclass

from ..value_objects import DEFAULT_AUDIENCE, WorkloadIdentityRequest


@dataclass(frozen=True, slots=True)
class FederatedIdentityCredential:
    """
    A trust binding from an external token issuer and subject to an application.

    The lookup identity is the (issuer, subject) pair. ``object_id`` is
    None until the directory has created the credential.
    """

    name: str
    issuer: str
    subject: str
    audiences: tuple[str, ...] = (DEFAULT_AUDIENCE,)
    description: str | None = None
    object_id: str | None = None

    def matches(self, issuer: str, subject: str) -> bool:
        """Check whether this credential trusts the given issuer and subject."""
        return self.issuer == issuer and self.subject == subject

    @classmethod
    def from_request(cls, request: WorkloadIdentityRequest) -> FederatedIdentityCredential:
        """Build the credential a workload identity request asks for."""
        return cls(
            name=request.credential_name,
            issuer=request.issuer,
            subject=request.subject,
            audiences=request.audiences,
            description=request.description,
        )
