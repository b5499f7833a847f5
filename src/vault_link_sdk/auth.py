"""
Credential kinds that can be exchanged for a Vault token.

Each credential supplies the three steps a :class:`~vault_link_sdk.connector.LoginConnector`
drives: the login mount path, the login parameters, and the exchange itself.
"""

import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import jwt
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization

from .exceptions import ConfigurationError
from .models import LoginResponse, Token
from .paths import path_combine
from .transport import TOKEN_HEADER, HttpTransport


class LoginCredential(ABC):
    """Base class for login credentials."""

    default_mount_name: str = ""

    def __init__(self, mount_name: Optional[str] = None):
        self.mount_name = (mount_name or self.default_mount_name).strip("/")

    @abstractmethod
    def build_login_parameters(self) -> Dict[str, Any]:
        """Return the request body for the login call."""
        pass

    def get_authentication_mount_path(self) -> str:
        """Return the login endpoint below the API prefix, or "" if no call is needed."""
        return path_combine("auth", self.mount_name, "login")

    async def perform_connection(
        self,
        transport: HttpTransport,
        mount_path: str,
        parameters: Dict[str, Any],
        description: str = "",
    ) -> Optional[LoginResponse]:
        """
        Exchange the credential for a token.

        Returns:
            The login response, or None if Vault reported no ``auth`` block.
        """
        envelope = await transport.post(mount_path, parameters, description=description or "Login")
        if not envelope.get_field("auth"):
            return None
        return envelope.get_vault_typed_object(LoginResponse, field="auth")


class TokenCredential(LoginCredential):
    """
    An already issued token.

    Nothing is exchanged; the token is validated by reading its own record.
    """

    default_mount_name = "token"

    def __init__(self, token_id: str, mount_name: Optional[str] = None):
        super().__init__(mount_name)
        self.token_id = token_id

    def build_login_parameters(self) -> Dict[str, Any]:
        return {}

    def get_authentication_mount_path(self) -> str:
        return ""

    async def perform_connection(
        self,
        transport: HttpTransport,
        mount_path: str,
        parameters: Dict[str, Any],
        description: str = "",
    ) -> Optional[LoginResponse]:
        if not self.token_id:
            return None
        envelope = await transport.get(
            path_combine("auth", self.mount_name, "lookup-self"),
            description=description or "Token login",
            headers={TOKEN_HEADER: self.token_id},
        )
        token = envelope.get_vault_typed_object(Token)
        return LoginResponse.from_token(token)


class AppRoleCredential(LoginCredential):
    """AppRole role_id / secret_id pair."""

    default_mount_name = "approle"

    def __init__(self, role_id: str, secret_id: str = "", mount_name: Optional[str] = None):
        super().__init__(mount_name)
        self.role_id = role_id
        self.secret_id = secret_id

    def build_login_parameters(self) -> Dict[str, Any]:
        params = {"role_id": self.role_id}
        if self.secret_id:
            params["secret_id"] = self.secret_id
        return params


class LDAPCredential(LoginCredential):
    """LDAP username and password."""

    default_mount_name = "ldap"

    def __init__(self, username: str, password: str, mount_name: Optional[str] = None):
        super().__init__(mount_name)
        self.username = username
        self.password = password

    def build_login_parameters(self) -> Dict[str, Any]:
        return {"password": self.password}

    def get_authentication_mount_path(self) -> str:
        return path_combine("auth", self.mount_name, "login", self.username)


class JWTCredential(LoginCredential):
    """JWT presented to a Vault JWT/OIDC auth role."""

    default_mount_name = "jwt"

    def __init__(self, role: str, token: str, mount_name: Optional[str] = None):
        """
        Initialize JWT credential.

        Args:
            role: Name of the Vault role to log in against
            token: Encoded JWT

        Raises:
            ValueError: The token is not a well formed JWT
        """
        super().__init__(mount_name)
        try:
            self.claims = jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError as e:
            raise ValueError(f"Malformed JWT: {e}")
        self.role = role
        self.token = token

    def build_login_parameters(self) -> Dict[str, Any]:
        return {"role": self.role, "jwt": self.token}

    @classmethod
    def from_claims(
        cls,
        role: str,
        subject: str,
        secret_key: str,
        algorithm: str = "HS256",
        expires_in: int = 3600,
        mount_name: Optional[str] = None,
        **extra_claims: Any,
    ) -> "JWTCredential":
        """
        Sign a JWT for ``subject`` and wrap it in a credential.

        Args:
            role: Name of the Vault role to log in against
            subject: ``sub`` claim
            secret_key: Key used to sign the JWT
            algorithm: JWT algorithm (default: HS256)
            expires_in: Token expiration time in seconds
            extra_claims: Additional claims, e.g. ``aud``
        """
        now = int(time.time())
        payload = {"sub": subject, "iat": now, "exp": now + expires_in}
        payload.update(extra_claims)

        token = jwt.encode(payload, secret_key, algorithm=algorithm)
        return cls(role, token, mount_name=mount_name)


class CertificateCredential(LoginCredential):
    """
    TLS client certificate login.

    The certificate is presented during the TLS handshake, so the transport
    must be configured with the same certificate and key (see
    ``ClientConfig.client_cert`` / ``client_key``). Login is refused with
    :class:`ConfigurationError` when the transport presents a different
    certificate.
    """

    default_mount_name = "cert"

    def __init__(
        self,
        cert_path: str,
        key_path: str,
        role_name: str = "",
        key_password: Optional[str] = None,
        mount_name: Optional[str] = None,
    ):
        super().__init__(mount_name)
        self.cert_path = Path(cert_path)
        self.key_path = Path(key_path)
        self.role_name = role_name
        self.key_password = key_password

        self._load_certificate()

    def _load_certificate(self) -> None:
        """Load the client certificate and key and check that they belong together."""
        self.certificate = _load_pem_certificate(self.cert_path)
        try:
            password = self.key_password.encode() if self.key_password else None
            self.private_key = serialization.load_pem_private_key(
                self.key_path.read_bytes(), password=password
            )
        except (OSError, ValueError, TypeError) as e:
            raise ConfigurationError(f"Failed to load certificate key: {e}")

        if _public_key_bytes(self.private_key.public_key()) != _public_key_bytes(self.certificate.public_key()):
            raise ConfigurationError(f"Key {self.key_path} does not match certificate {self.cert_path}")

    @property
    def fingerprint(self) -> str:
        """SHA-256 fingerprint of the certificate, hex encoded."""
        return _fingerprint(self.certificate)

    def build_login_parameters(self) -> Dict[str, Any]:
        if self.role_name:
            return {"name": self.role_name}
        return {}

    async def perform_connection(
        self,
        transport: HttpTransport,
        mount_path: str,
        parameters: Dict[str, Any],
        description: str = "",
    ) -> Optional[LoginResponse]:
        if not transport.client_cert:
            raise ConfigurationError(
                "Certificate login requires the transport to be configured with client_cert"
            )
        presented = Path(transport.client_cert)
        if presented.resolve() != self.cert_path.resolve():
            if _fingerprint(_load_pem_certificate(presented)) != self.fingerprint:
                raise ConfigurationError(
                    f"Transport presents {presented}, which is not the credential's certificate {self.cert_path}"
                )
        return await super().perform_connection(transport, mount_path, parameters, description)


def _load_pem_certificate(path: Path) -> x509.Certificate:
    try:
        return x509.load_pem_x509_certificate(path.read_bytes())
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to load certificate {path}: {e}")


def _fingerprint(certificate: x509.Certificate) -> str:
    return certificate.fingerprint(hashes.SHA256()).hex()


def _public_key_bytes(public_key: Any) -> bytes:
    return public_key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
