"""Classification of the error envelope carried by Graph responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..exceptions import DirectoryServiceError, GraphErrorDecodeError
from ..value_objects import CLEAN, EnvelopeStatus, Malformed, ServiceError

ERROR_KEY = "error"


def classify(additional_data: Any) -> EnvelopeStatus:
    """
    Look for a structured service error in a response's additional data.

    A response can report success at the HTTP level and still carry an
    ``error`` object; callers must act on the result before reading any
    other field of the same response.

    Args:
        additional_data: The decoded response object (None for empty bodies).

    Returns:
        ``CLEAN`` when no error object is present, ``ServiceError`` for a
        well-formed error object, ``Malformed`` when the payload shape
        prevents checking.
    """
    if additional_data is None:
        return CLEAN
    if not isinstance(additional_data, Mapping):
        return Malformed(f"expected a JSON object, got {type(additional_data).__name__}")

    error = additional_data.get(ERROR_KEY)
    if error is None:
        return CLEAN
    if not isinstance(error, Mapping):
        return Malformed(f"'{ERROR_KEY}' is a {type(error).__name__}, not an object")

    code = error.get("code")
    message = error.get("message", "")
    if not isinstance(code, str) or not code:
        return Malformed(f"'{ERROR_KEY}.code' is missing or not a string")
    if not isinstance(message, str):
        return Malformed(f"'{ERROR_KEY}.message' is not a string")

    inner_error = error.get("innerError")
    if not isinstance(inner_error, Mapping):
        inner_error = None
    request_id = inner_error.get("request-id") if inner_error else None

    return ServiceError(
        code=code,
        message=message,
        request_id=request_id if isinstance(request_id, str) else None,
        inner_error=dict(inner_error) if inner_error else None,
    )


def raise_for_envelope(additional_data: Any, *, status_code: int | None = None) -> None:
    """
    Raise if the response envelope carries an error or cannot be decoded.

    Raises:
        DirectoryServiceError: A service error object was found.
        GraphErrorDecodeError: The envelope shape is malformed.
    """
    match classify(additional_data):
        case ServiceError() as error:
            raise DirectoryServiceError.from_service_error(error, status_code=status_code)
        case Malformed(reason=reason):
            msg = f"Cannot decode Graph error envelope: {reason}"
            raise GraphErrorDecodeError(msg)
