"""
Maps failed Vault HTTP responses onto the SDK error taxonomy.
"""

import json
from typing import Dict, List, Optional, Tuple, Type

from .exceptions import (
    ErrorCode,
    ForbiddenError,
    GenericBackendError,
    InternalServerError,
    InvalidDataError,
    NotFoundError,
    RateLimitError,
    SealedError,
    VaultLinkError,
)

# Substrings of Vault error messages (lower case) and the sub-code they imply.
_ERROR_CODE_RULES: List[Tuple[str, ErrorCode]] = [
    ("path is already in use", ErrorCode.BACKEND_MOUNT_ALREADY_EXISTS),
    ("permission denied", ErrorCode.PERMISSION_DENIED),
    ("check-and-set parameter required", ErrorCode.CHECK_AND_SET_MISSING),
    ("check-and-set parameter did not match", ErrorCode.CAS_VERSION_MISMATCH),
    ("invalid role id", ErrorCode.LOGIN_ROLE_ID_NOT_FOUND),
    ("missing role_id", ErrorCode.LOGIN_ROLE_ID_NOT_FOUND),
    ("invalid secret id", ErrorCode.LOGIN_SECRET_ID_NOT_FOUND),
    ("ldap result code 200", ErrorCode.LDAP_SERVER_CONNECTION_ISSUE),
    ("ldap operation failed", ErrorCode.LDAP_CREDENTIALS_FAILURE),
]

_STATUS_ERRORS: Dict[int, Type[VaultLinkError]] = {
    400: InvalidDataError,
    403: ForbiddenError,
    404: NotFoundError,
}

_BACKEND_STATUS_ERRORS: Dict[int, Type[GenericBackendError]] = {
    429: RateLimitError,
    500: InternalServerError,
    503: SealedError,
}


def extract_error_messages(body_text: str) -> List[str]:
    """Return the messages of a Vault ``{"errors": [...]}`` body, or the raw text."""
    if not body_text or not body_text.strip():
        return []
    try:
        decoded = json.loads(body_text)
    except ValueError:
        return [body_text.strip()]

    if isinstance(decoded, dict):
        errors = decoded.get("errors")
        if isinstance(errors, list):
            return [str(e) for e in errors]
        if isinstance(errors, str):
            return [errors]
        if "message" in decoded:
            return [str(decoded["message"])]
    return [body_text.strip()]


def match_error_code(messages: List[str]) -> Optional[ErrorCode]:
    """Return the first sub-code whose fragment occurs in any message."""
    for message in messages:
        lowered = message.lower()
        for fragment, code in _ERROR_CODE_RULES:
            if fragment in lowered:
                return code
    return None


def classify_error(status_code: int, body_text: str = "", description: str = "") -> VaultLinkError:
    """
    Build the exception corresponding to a non-2xx Vault response.

    Every status resolves to exactly one exception; statuses without a
    dedicated class fall back to :class:`GenericBackendError`.

    Args:
        status_code: HTTP status code of the response
        body_text: Raw response body
        description: Optional description of the operation, used in messages
    """
    messages = extract_error_messages(body_text)
    error_code = match_error_code(messages)
    detail = "; ".join(messages) if messages else "no error details returned"
    prefix = f"{description}: " if description else ""
    message = f"{prefix}HTTP {status_code}: {detail}"

    if status_code == 404 and error_code is None and not messages:
        error_code = ErrorCode.OBJECT_DOES_NOT_EXIST

    if status_code in _STATUS_ERRORS:
        return _STATUS_ERRORS[status_code](
            message, error_code=error_code, status_code=status_code, errors=messages
        )

    error_class = _BACKEND_STATUS_ERRORS.get(status_code, GenericBackendError)
    return error_class(
        message,
        status_code=status_code,
        body=body_text,
        error_code=error_code,
        errors=messages,
    )
