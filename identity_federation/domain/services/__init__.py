"""Domain services - Stateless operations on directory responses."""

from .error_classifier import classify, raise_for_envelope
from .filters import display_name_filter, equals_filter, first_match, quote_literal, subject_filter

__all__ = [
    "classify",
    "display_name_filter",
    "equals_filter",
    "first_match",
    "quote_literal",
    "raise_for_envelope",
    "subject_filter",
]
