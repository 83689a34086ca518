"""OData filter expressions and client-side match helpers."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")


def quote_literal(value: str) -> str:
    """Quote a string literal for an OData filter, doubling embedded quotes."""
    return "'" + value.replace("'", "''") + "'"


def equals_filter(field: str, value: str) -> str:
    """Build an exact-match filter on a single string field."""
    return f"{field} eq {quote_literal(value)}"


def display_name_filter(display_name: str) -> str:
    """Filter matching objects by exact display name."""
    return equals_filter("displayName", display_name)


def subject_filter(subject: str) -> str:
    """Filter matching federated credentials by exact subject."""
    return equals_filter("subject", subject)


def first_match(items: Iterable[T], predicate: Callable[[T], bool]) -> T | None:
    """
    Return the first item satisfying ``predicate``, or None.

    Used for the client-side half of compound-key lookups, where the
    server can filter on only one field.
    """
    for item in items:
        if predicate(item):
            return item
    return None
