"""Application ports - Interfaces for external adapters."""

from .directory_gateway import DirectoryGateway

__all__ = [
    "DirectoryGateway",
]
