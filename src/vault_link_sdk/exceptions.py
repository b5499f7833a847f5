"""
Exception classes for Vault Link SDK.
"""

from enum import Enum
from typing import Optional, Sequence


class ErrorCode(str, Enum):
    """Service-specific sub-codes attached to classified errors."""
    BACKEND_MOUNT_ALREADY_EXISTS = "backend_mount_already_exists"
    PERMISSION_DENIED = "permission_denied"
    OBJECT_DOES_NOT_EXIST = "object_does_not_exist"
    CHECK_AND_SET_MISSING = "check_and_set_missing"
    CAS_VERSION_MISMATCH = "cas_version_mismatch"
    LOGIN_ROLE_ID_NOT_FOUND = "login_role_id_not_found"
    LOGIN_SECRET_ID_NOT_FOUND = "login_secret_id_not_found"
    LDAP_SERVER_CONNECTION_ISSUE = "ldap_server_connection_issue"
    LDAP_CREDENTIALS_FAILURE = "ldap_credentials_failure"


class VaultLinkError(Exception):
    """Base exception for Vault Link SDK."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        status_code: Optional[int] = None,
        errors: Sequence[str] = (),
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.errors = tuple(errors)


class NotFoundError(VaultLinkError):
    """The addressed object does not exist (HTTP 404)."""
    pass


class ForbiddenError(VaultLinkError):
    """Permission denied or bad credentials (HTTP 403)."""
    pass


class InvalidDataError(VaultLinkError):
    """Malformed or invalid request data (HTTP 400)."""
    pass


class ParseError(VaultLinkError):
    """Response body could not be interpreted as the expected JSON shape."""
    pass


class FieldNotFoundError(ParseError):
    """A required member was missing from a response body."""
    pass


class GenericBackendError(VaultLinkError):
    """Any other non-2xx response. Carries the raw body for diagnostics."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        error_code: Optional[ErrorCode] = None,
        errors: Sequence[str] = (),
    ):
        super().__init__(message, error_code=error_code, status_code=status_code, errors=errors)
        self.body = body


class RateLimitError(GenericBackendError):
    """Rate limit exceeded or standby node in a warning state (HTTP 429)."""
    pass


class InternalServerError(GenericBackendError):
    """Internal server error (HTTP 500)."""
    pass


class SealedError(GenericBackendError):
    """The server is sealed or down for maintenance (HTTP 503)."""
    pass


class RequestTimeoutError(VaultLinkError):
    """The request did not complete within the configured timeout."""
    pass


class ConnectionError(VaultLinkError):
    """Connection to the Vault server failed."""
    pass


class ConfigurationError(VaultLinkError):
    """Configuration error."""
    pass


class ArgumentError(VaultLinkError, ValueError):
    """A caller supplied contradictory or invalid arguments."""
    pass
