"""Domain exceptions."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .value_objects import ServiceError


class IdentityFederationError(Exception):
    """Base exception for identity federation errors."""


class TransportError(IdentityFederationError):
    """Raised when the call to the directory service fails below the API level."""


class AuthenticationError(TransportError):
    """Raised when an access token cannot be acquired or is rejected."""


class RequestTimeoutError(TransportError):
    """Raised when a directory request exceeds its timeout."""


class RequestCancelledError(TransportError, asyncio.CancelledError):
    """
    Raised when the calling task is cancelled during a directory request.

    Also an ``asyncio.CancelledError`` so task cancellation keeps working.
    """


class DirectoryServiceError(IdentityFederationError):
    """
    A structured error object returned by the directory service.

    Attributes:
        code: Graph error code (e.g. ``Request_ResourceNotFound``).
        message: Human-readable error message.
        status_code: HTTP status of the response, when known.
        request_id: Graph request id from the inner error, when present.
        inner_error: Raw inner error object, when present.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: int | None = None,
        request_id: str | None = None,
        inner_error: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.request_id = request_id
        self.inner_error = inner_error
        super().__init__(f"{code}: {message}")

    @classmethod
    def from_service_error(
        cls, error: ServiceError, *, status_code: int | None = None
    ) -> DirectoryServiceError:
        """Build the exception from a classified envelope error."""
        return cls(
            error.code,
            error.message,
            status_code=status_code,
            request_id=error.request_id,
            inner_error=error.inner_error,
        )


class GraphErrorDecodeError(IdentityFederationError):
    """Raised when a response envelope cannot be decoded."""


class NotFoundError(IdentityFederationError):
    """Raised when a lookup by display name matches nothing."""

    kind = "object"

    def __init__(self, display_name: str) -> None:
        self.display_name = display_name
        super().__init__(f"{self.kind} with display name '{display_name}' not found")


class ApplicationNotFoundError(NotFoundError):
    """Raised when no application has the requested display name."""

    kind = "application"


class ServicePrincipalNotFoundError(NotFoundError):
    """Raised when no service principal has the requested display name."""

    kind = "service principal"


class FederatedCredentialNotFoundError(IdentityFederationError):
    """Raised when no federated credential matches both issuer and subject."""

    def __init__(self, application_object_id: str, issuer: str, subject: str) -> None:
        self.application_object_id = application_object_id
        self.issuer = issuer
        self.subject = subject
        super().__init__(
            f"federated credential (issuer={issuer}, subject={subject}) "
            f"not found on application {application_object_id}"
        )
