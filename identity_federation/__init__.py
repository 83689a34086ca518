"""Provision and tear down Entra ID workload identity federation."""

__version__ = "1.0.0"
