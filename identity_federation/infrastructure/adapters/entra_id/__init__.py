"""Entra ID adapter backed by Microsoft Graph."""

from .gateway import EntraIdDirectoryGateway
from .graph_client import GraphClient, GraphClientConfig

__all__ = [
    "EntraIdDirectoryGateway",
    "GraphClient",
    "GraphClientConfig",
]
