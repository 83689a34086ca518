"""Application settings loaded from environment variables."""

import os
from dataclasses import dataclass, field
from functools import cached_property

from ...domain.value_objects import DEFAULT_AUDIENCE
from ..adapters.entra_id.graph_client import GraphClientConfig


def _env_int(key: str, default: int) -> int:
    """Get integer from environment variable."""
    return int(os.environ.get(key, str(default)))


def _env_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    return float(os.environ.get(key, str(default)))


def _env_str(key: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


def _env_set(key: str) -> frozenset[str]:
    """Get a comma-separated set from environment variable."""
    return frozenset(item.strip() for item in _env_str(key).split(",") if item.strip())


@dataclass
class Settings:
    """Application settings container."""

    # Azure/Entra ID
    azure_tenant_id: str = field(default_factory=lambda: _env_str("AZURE_TENANT_ID"))
    azure_client_id: str = field(default_factory=lambda: _env_str("AZURE_CLIENT_ID"))
    azure_client_secret: str = field(default_factory=lambda: _env_str("AZURE_CLIENT_SECRET"))

    # Graph API
    graph_base_url: str = field(
        default_factory=lambda: _env_str("GRAPH_BASE_URL", "https://graph.microsoft.com/v1.0")
    )
    graph_timeout_seconds: float = field(default_factory=lambda: _env_float("GRAPH_TIMEOUT_SECONDS", 30.0))

    # Provisioning defaults
    default_audience: str = field(default_factory=lambda: _env_str("DEFAULT_AUDIENCE", DEFAULT_AUDIENCE))
    service_principal_tags: frozenset[str] = field(default_factory=lambda: _env_set("SERVICE_PRINCIPAL_TAGS"))

    log_level: str = field(default_factory=lambda: _env_str("LOG_LEVEL", "INFO"))

    # API settings
    api_host: str = field(default_factory=lambda: _env_str("API_HOST", "0.0.0.0"))  # noqa: S104
    api_port: int = field(default_factory=lambda: _env_int("API_PORT", 8080))

    def validate(self) -> None:
        """Validate required settings."""
        missing: list[str] = []

        if not self.azure_tenant_id:
            missing.append("AZURE_TENANT_ID")
        if not self.azure_client_id:
            missing.append("AZURE_CLIENT_ID")
        if not self.azure_client_secret:
            missing.append("AZURE_CLIENT_SECRET")

        if missing:
            msg = f"Missing required environment variables: {', '.join(missing)}"
            raise ValueError(msg)

        if self.graph_timeout_seconds <= 0:
            msg = f"GRAPH_TIMEOUT_SECONDS must be positive, got {self.graph_timeout_seconds}"
            raise ValueError(msg)

    @cached_property
    def graph_config(self) -> GraphClientConfig:
        """Get Graph API client configuration."""
        return GraphClientConfig(
            tenant_id=self.azure_tenant_id,
            client_id=self.azure_client_id,
            client_secret=self.azure_client_secret,
            base_url=self.graph_base_url.rstrip("/"),
            timeout=self.graph_timeout_seconds,
        )


def load_settings() -> Settings:
    """Load and validate settings from environment."""
    settings = Settings()
    settings.validate()
    return settings
