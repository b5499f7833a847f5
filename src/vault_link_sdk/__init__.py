"""
Vault Link Python SDK

Async client core for HashiCorp Vault style secret services: authenticated
HTTP dispatch, response envelope parsing, error classification, path
normalization and token session management.
"""

from .client import VaultLinkClient
from .auth import (
    LoginCredential,
    TokenCredential,
    AppRoleCredential,
    LDAPCredential,
    JWTCredential,
    CertificateCredential,
)
from .connector import ConnectionState, LoginConnector
from .envelope import NOT_FOUND, ResponseEnvelope, convert_json_array_to_list, get_json_property_value
from .exceptions import (
    ErrorCode,
    VaultLinkError,
    NotFoundError,
    ForbiddenError,
    InvalidDataError,
    ParseError,
    FieldNotFoundError,
    GenericBackendError,
    RateLimitError,
    InternalServerError,
    SealedError,
    RequestTimeoutError,
    ConnectionError,
    ConfigurationError,
    ArgumentError,
)
from .models import LoginResponse, StringOrList, Token
from .paths import (
    Address,
    name_from_path,
    path_from_path,
    name_and_path_tuple,
    name_and_path_from_values,
    path_combine,
)
from .session import TokenSession
from .transport import HttpTransport
from .config import ClientConfig

__version__ = "1.0.0"

__all__ = [
    "VaultLinkClient",
    "LoginCredential",
    "TokenCredential",
    "AppRoleCredential",
    "LDAPCredential",
    "JWTCredential",
    "CertificateCredential",
    "ConnectionState",
    "LoginConnector",
    "NOT_FOUND",
    "ResponseEnvelope",
    "convert_json_array_to_list",
    "get_json_property_value",
    "ErrorCode",
    "VaultLinkError",
    "NotFoundError",
    "ForbiddenError",
    "InvalidDataError",
    "ParseError",
    "FieldNotFoundError",
    "GenericBackendError",
    "RateLimitError",
    "InternalServerError",
    "SealedError",
    "RequestTimeoutError",
    "ConnectionError",
    "ConfigurationError",
    "ArgumentError",
    "LoginResponse",
    "StringOrList",
    "Token",
    "Address",
    "name_from_path",
    "path_from_path",
    "name_and_path_tuple",
    "name_and_path_from_values",
    "path_combine",
    "TokenSession",
    "HttpTransport",
    "ClientConfig",
]
