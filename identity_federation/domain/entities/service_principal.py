"""Service principal entity."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ServicePrincipal:
    """The usable identity instance bound to an application through ``app_id``."""

    object_id: str
    app_id: str
    display_name: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)
