"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
import re
from typing import Any
from uuid import uuid4

import httpx
import pytest

from identity_federation.domain.entities import FederatedIdentityCredential
from identity_federation.domain.value_objects import WorkloadIdentityRequest
from identity_federation.infrastructure.adapters.entra_id import (
    EntraIdDirectoryGateway,
    GraphClient,
    GraphClientConfig,
)

BASE_URL = "https://graph.test/v1.0"
ISSUER = "https://oidc.prod-aks.azure.com/tenant-guid/"
SUBJECT = "system:serviceaccount:default:workload-sa"

_FILTER = re.compile(r"^(\w+) eq '((?:[^']|'')*)'$")


def _error(status_code: int, code: str, message: str) -> httpx.Response:
    return httpx.Response(status_code, json={"error": {"code": code, "message": message}})


class FakeGraph:
    """
    In-memory stand-in for the Graph endpoints the gateway calls.

    Set ``envelope_error`` to embed an error object in every successful
    response body.
    """

    def __init__(self) -> None:
        self.applications: list[dict[str, Any]] = []
        self.service_principals: list[dict[str, Any]] = []
        self.credentials: dict[str, list[dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []
        self.envelope_error: dict[str, Any] | None = None

    def add_application(self, display_name: str) -> dict[str, Any]:
        app = {"id": str(uuid4()), "appId": str(uuid4()), "displayName": display_name}
        self.applications.append(app)
        self.credentials[app["id"]] = []
        return app

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._route(request)
        if self.envelope_error is not None and response.is_success:
            body = json.loads(response.content) if response.content else {}
            body["error"] = self.envelope_error
            return httpx.Response(200, json=body)
        return response

    def _route(self, request: httpx.Request) -> httpx.Response:
        parts = request.url.path.removeprefix("/v1.0/").split("/")
        body = json.loads(request.content) if request.content else {}

        match request.method, parts:
            case "POST", ["applications"]:
                return httpx.Response(201, json=self.add_application(body["displayName"]))
            case "GET", ["applications"]:
                return self._list(request, self.applications)
            case "DELETE", ["applications", object_id]:
                return self._delete(self.applications, object_id)
            case "POST", ["servicePrincipals"]:
                app = next((a for a in self.applications if a["appId"] == body["appId"]), None)
                if app is None:
                    return _error(400, "Request_BadRequest", "The appId is invalid.")
                sp = {
                    "id": str(uuid4()),
                    "appId": app["appId"],
                    "displayName": app["displayName"],
                    "tags": body.get("tags", []),
                }
                self.service_principals.append(sp)
                return httpx.Response(201, json=sp)
            case "GET", ["servicePrincipals"]:
                return self._list(request, self.service_principals)
            case "DELETE", ["servicePrincipals", object_id]:
                return self._delete(self.service_principals, object_id)
            case _, ["applications", object_id, "federatedIdentityCredentials", *rest]:
                if object_id not in self.credentials:
                    return _error(404, "Request_ResourceNotFound", f"Resource '{object_id}' does not exist.")
                credentials = self.credentials[object_id]
                if request.method == "POST" and not rest:
                    fic = {"id": str(uuid4()), **body}
                    credentials.append(fic)
                    return httpx.Response(201, json=fic)
                if request.method == "GET" and not rest:
                    return self._list(request, credentials)
                if request.method == "DELETE" and len(rest) == 1:
                    return self._delete(credentials, rest[0])
        return _error(400, "BadRequest", f"Unsupported request {request.method} {request.url.path}")

    @staticmethod
    def _list(request: httpx.Request, items: list[dict[str, Any]]) -> httpx.Response:
        match = _FILTER.match(request.url.params.get("$filter", ""))
        if match is None:
            return _error(400, "BadRequest", "Invalid filter clause")
        field, value = match.group(1), match.group(2).replace("''", "'")
        return httpx.Response(200, json={"value": [i for i in items if i.get(field) == value]})

    @staticmethod
    def _delete(items: list[dict[str, Any]], object_id: str) -> httpx.Response:
        for item in items:
            if item["id"] == object_id:
                items.remove(item)
                return httpx.Response(204)
        return _error(404, "Request_ResourceNotFound", f"Resource '{object_id}' does not exist.")


async def static_token() -> str:
    """Token provider that skips MSAL."""
    return "test-token"


def make_client(handler: Any) -> GraphClient:
    """Build a Graph client whose HTTP traffic goes to ``handler``."""
    return GraphClient(
        GraphClientConfig(
            tenant_id="tenant",
            client_id="client",
            client_secret="secret",
            base_url=BASE_URL,
        ),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        token_provider=static_token,
    )


@pytest.fixture
def fake_graph() -> FakeGraph:
    """Empty fake Graph directory."""
    return FakeGraph()


@pytest.fixture
def gateway(fake_graph: FakeGraph) -> EntraIdDirectoryGateway:
    """Gateway wired to the fake Graph directory."""
    return EntraIdDirectoryGateway(make_client(fake_graph.handler))


@pytest.fixture
def fic() -> FederatedIdentityCredential:
    """A federated credential for a Kubernetes service account."""
    return FederatedIdentityCredential(
        name="workload-sa",
        issuer=ISSUER,
        subject=SUBJECT,
    )


@pytest.fixture
def workload_request() -> WorkloadIdentityRequest:
    """A workload identity request for a Kubernetes service account."""
    return WorkloadIdentityRequest(
        application_name="workload-app",
        issuer=ISSUER,
        subject=SUBJECT,
        service_principal_tags=frozenset({"team:payments"}),
    )
