"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ....domain.exceptions import DirectoryServiceError, IdentityFederationError, TransportError
from ....domain.value_objects import WorkloadIdentityRequest
from .models import (
    ErrorResponse,
    HealthResponse,
    ProvisionResponse,
    TeardownResponse,
    WorkloadIdentityRequestModel,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable, Coroutine

    from ....application.use_cases import ProvisionResult, TeardownResult

logger = logging.getLogger(__name__)


def _to_domain_request(
    body: WorkloadIdentityRequestModel, default_audience: str
) -> WorkloadIdentityRequest:
    """Convert an API request body to the domain request."""
    return WorkloadIdentityRequest(
        application_name=body.application_name,
        issuer=body.issuer,
        subject=body.subject,
        audiences=tuple(body.audiences or (default_audience,)),
        credential_name=body.credential_name or "",
        service_principal_tags=frozenset(body.service_principal_tags),
        description=body.description,
    )


def _error_response(status_code: int, error: str, exc: Exception, code: str | None = None) -> JSONResponse:
    """Build a JSON error response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=str(exc), code=code).model_dump(),
    )


def create_app(
    provision_func: Callable[[WorkloadIdentityRequest], Coroutine[None, None, ProvisionResult]],
    teardown_func: Callable[[WorkloadIdentityRequest], Coroutine[None, None, TeardownResult]],
    *,
    default_audience: str,
    version: str = "1.0.0",
) -> FastAPI:
    """
    Create FastAPI application.

    Args:
        provision_func: Async function provisioning a workload identity.
        teardown_func: Async function tearing down a workload identity.
        default_audience: Audience used when a request names none.
        version: Application version string.

    Returns:
        Configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        logger.info("API server starting...")
        yield
        logger.info("API server shutting down...")

    app = FastAPI(
        title="Identity Federation Provisioner API",
        description="Provision and tear down Entra ID workload identities: application, "
        "service principal and federated identity credential.",
        version=version,
        lifespan=lifespan,
        responses={
            500: {"model": ErrorResponse, "description": "Internal server error"},
            502: {"model": ErrorResponse, "description": "Directory service error"},
            503: {"model": ErrorResponse, "description": "Directory service unreachable"},
        },
    )

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            version=version,
            timestamp=datetime.now(UTC),
        )

    @app.post(
        "/api/v1/workload-identities",
        response_model=ProvisionResponse,
        tags=["Operations"],
        summary="Provision a workload identity",
        description="Look up or create the application, service principal and "
        "federated credential. Safe to repeat for the same request.",
    )
    async def provision(body: WorkloadIdentityRequestModel) -> ProvisionResponse:
        logger.info("API: Provisioning %s", body.application_name)
        result = await provision_func(_to_domain_request(body, default_audience))
        return ProvisionResponse(
            application_object_id=result.application.object_id,
            application_client_id=result.application.app_id,
            service_principal_object_id=result.service_principal.object_id,
            federated_credential_object_id=result.federated_credential.object_id,
            created=sorted(result.created),
        )

    @app.delete(
        "/api/v1/workload-identities",
        response_model=TeardownResponse,
        tags=["Operations"],
        summary="Tear down a workload identity",
    )
    async def teardown(body: WorkloadIdentityRequestModel) -> TeardownResponse:
        logger.info("API: Tearing down %s", body.application_name)
        result = await teardown_func(_to_domain_request(body, default_audience))
        return TeardownResponse(deleted=sorted(result.deleted))

    @app.exception_handler(DirectoryServiceError)
    async def directory_error_handler(request: Request, exc: DirectoryServiceError) -> JSONResponse:  # noqa: ARG001
        logger.warning("API: Directory service error %s", exc.code)
        return _error_response(status.HTTP_502_BAD_GATEWAY, "Directory service error", exc, exc.code)

    @app.exception_handler(TransportError)
    async def transport_error_handler(request: Request, exc: TransportError) -> JSONResponse:  # noqa: ARG001
        logger.warning("API: Directory service unreachable: %s", exc)
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Directory service unreachable", exc)

    @app.exception_handler(IdentityFederationError)
    async def federation_error_handler(request: Request, exc: IdentityFederationError) -> JSONResponse:  # noqa: ARG001
        logger.error("API: Provisioning failed: %s", exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Provisioning failed", exc)

    @app.exception_handler(ValueError)
    async def validation_error_handler(request: Request, exc: ValueError) -> JSONResponse:  # noqa: ARG001
        return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Invalid request", exc)

    return app
