"""Application entity representing an Entra ID app registration."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Application:
    """
    An Entra ID application registration.

    ``object_id`` is the directory key used for updates and deletes;
    ``app_id`` is the client ID tokens are issued for.
    """

    object_id: str
    app_id: str
    display_name: str
