"""Infrastructure adapters - Implementations of application ports."""

from .entra_id import EntraIdDirectoryGateway, GraphClient, GraphClientConfig

__all__ = [
    "EntraIdDirectoryGateway",
    "GraphClient",
    "GraphClientConfig",
]
