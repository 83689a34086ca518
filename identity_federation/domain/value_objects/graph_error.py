"""Classified state of a Graph response error envelope."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Clean:
    """No error object in the envelope."""


@dataclass(frozen=True, slots=True)
class ServiceError:
    """A well-formed error object embedded in the envelope."""

    code: str
    message: str
    request_id: str | None = None
    inner_error: dict[str, Any] | None = field(default=None, compare=False, hash=False)


@dataclass(frozen=True, slots=True)
class Malformed:
    """The envelope could not be checked for an error object."""

    reason: str


EnvelopeStatus = Clean | ServiceError | Malformed

CLEAN = Clean()
