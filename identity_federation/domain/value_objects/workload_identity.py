"""Workload identity request value object."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

DEFAULT_AUDIENCE = "api://AzureADTokenExchange"

_CREDENTIAL_NAME_INVALID = re.compile(r"[^A-Za-z0-9_-]+")


def service_account_subject(namespace: str, name: str) -> str:
    """Subject claim Kubernetes puts in a projected service account token."""
    return f"system:serviceaccount:{namespace}:{name}"


def credential_name_for(issuer: str, subject: str) -> str:
    """Derive a federated credential name from the trust pair."""
    host = issuer.split("://", 1)[-1]
    return _CREDENTIAL_NAME_INVALID.sub("-", f"{host}-{subject}").strip("-")[:120]


@dataclass(frozen=True, slots=True)
class WorkloadIdentityRequest:
    """Everything needed to provision or tear down one workload identity."""

    application_name: str
    issuer: str
    subject: str
    audiences: tuple[str, ...] = (DEFAULT_AUDIENCE,)
    credential_name: str = ""
    service_principal_tags: frozenset[str] = field(default_factory=frozenset)
    description: str | None = None

    def __post_init__(self) -> None:
        """Validate required fields and fill in the credential name."""
        missing = [
            name
            for name in ("application_name", "issuer", "subject")
            if not getattr(self, name)
        ]
        if missing:
            msg = f"Workload identity request is missing: {', '.join(missing)}"
            raise ValueError(msg)
        if not self.audiences:
            msg = "Workload identity request needs at least one audience"
            raise ValueError(msg)
        if not self.credential_name:
            object.__setattr__(
                self, "credential_name", credential_name_for(self.issuer, self.subject)
            )
