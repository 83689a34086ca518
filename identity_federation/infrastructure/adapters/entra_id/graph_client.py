"""Microsoft Graph API client for Entra ID."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, ClassVar

import httpx
import msal

from ....domain.exceptions import (
    AuthenticationError,
    GraphErrorDecodeError,
    RequestCancelledError,
    RequestTimeoutError,
    TransportError,
)
from ....domain.services import classify, raise_for_envelope
from ....domain.value_objects import ServiceError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[str]]


@dataclass(frozen=True, slots=True)
class GraphClientConfig:
    """Configuration for Microsoft Graph API client."""

    tenant_id: str
    client_id: str
    client_secret: str
    base_url: str = "https://graph.microsoft.com/v1.0"
    timeout: float = 30.0


class GraphClient:
    """
    Async client for Microsoft Graph API.

    Handles authentication and turns transport-level failures into the
    domain error taxonomy. Successful responses are returned decoded but
    unclassified; the caller runs the error classifier on them.
    """

    AUTHORITY_BASE: ClassVar[str] = "https://login.microsoftonline.com"
    SCOPE: ClassVar[list[str]] = ["https://graph.microsoft.com/.default"]

    def __init__(
        self,
        config: GraphClientConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        token_provider: TokenProvider | None = None,
    ) -> None:
        """
        Initialize the Graph client.

        Args:
            config: Tenant, credentials and endpoint settings.
            http_client: Shared HTTP client; a short-lived one is opened per
                request when omitted.
            token_provider: Coroutine returning a bearer token; MSAL client
                credentials flow is used when omitted.
        """
        self._config = config
        self._http_client = http_client
        self._token_provider = token_provider or self._acquire_token
        self._access_token: str | None = None
        self._token_expiry: datetime | None = None
        self._msal_app: msal.ConfidentialClientApplication | None = None

    def _get_msal_app(self) -> msal.ConfidentialClientApplication:
        """Get or create MSAL application instance."""
        if self._msal_app is None:
            authority = f"{self.AUTHORITY_BASE}/{self._config.tenant_id}"
            self._msal_app = msal.ConfidentialClientApplication(
                client_id=self._config.client_id,
                client_credential=self._config.client_secret,
                authority=authority,
            )
        return self._msal_app

    async def _acquire_token(self) -> str:
        """Acquire access token using client credentials flow."""
        # Check if existing token is still valid
        if self._access_token and self._token_expiry and datetime.now(UTC) < self._token_expiry:
            return self._access_token

        app = self._get_msal_app()
        # MSAL is synchronous; keep the event loop free during the token round-trip
        result = await asyncio.to_thread(app.acquire_token_for_client, scopes=self.SCOPE)

        if "access_token" not in result:
            error = result.get("error_description", result.get("error", "Unknown error"))
            msg = f"Failed to acquire access token: {error}"
            raise AuthenticationError(msg)

        self._access_token = result["access_token"]
        expires_in = result.get("expires_in", 3600)
        # Refresh 5 minutes before expiry
        self._token_expiry = datetime.now(UTC) + timedelta(seconds=expires_in - 300)

        return self._access_token

    async def get(self, path: str, *, params: dict[str, str] | None = None) -> dict[str, Any]:
        """Send a GET request and return the decoded body."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        """Send a POST request and return the decoded body."""
        return await self.request("POST", path, json=body)

    async def delete(self, path: str) -> dict[str, Any]:
        """Send a DELETE request and return the decoded body (usually empty)."""
        return await self.request("DELETE", path)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Send one authenticated request to the Graph API.

        Args:
            method: HTTP method.
            path: Path relative to the configured base URL.
            params: Query parameters.
            json: JSON request body.

        Returns:
            The decoded JSON body, or an empty dict for bodiless responses.

        Raises:
            TransportError: Network, timeout, cancellation or authentication failure.
            DirectoryServiceError: Non-success response carrying a Graph error.
            GraphErrorDecodeError: Success response whose body is not JSON.
        """
        url = f"{self._config.base_url}{path}"
        try:
            token = await self._token_provider()
            headers = {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            }
            if self._http_client is not None:
                response = await self._http_client.request(
                    method, url, params=params, json=json, headers=headers
                )
            else:
                async with httpx.AsyncClient(timeout=self._config.timeout) as client:
                    response = await client.request(
                        method, url, params=params, json=json, headers=headers
                    )
        except asyncio.CancelledError as e:
            msg = f"{method} {path} cancelled"
            raise RequestCancelledError(msg) from e
        except httpx.TimeoutException as e:
            msg = f"{method} {path} timed out: {e}"
            raise RequestTimeoutError(msg) from e
        except httpx.HTTPError as e:
            msg = f"{method} {path} failed: {e}"
            raise TransportError(msg) from e

        return self._decode(method, path, response)

    @staticmethod
    def _decode(method: str, path: str, response: httpx.Response) -> dict[str, Any]:
        """Decode a response body, raising for unsuccessful statuses."""
        payload: Any = None
        if response.content:
            try:
                payload = response.json()
            except ValueError as e:
                if response.is_success:
                    msg = f"{method} {path} returned a non-JSON body"
                    raise GraphErrorDecodeError(msg) from e

        if response.is_success:
            return payload if payload is not None else {}

        if response.status_code == httpx.codes.UNAUTHORIZED:
            msg = f"{method} {path} was rejected as unauthenticated"
            raise AuthenticationError(msg)

        if isinstance(classify(payload), ServiceError):
            raise_for_envelope(payload, status_code=response.status_code)

        msg = f"{method} {path} failed with HTTP {response.status_code}"
        raise TransportError(msg)
