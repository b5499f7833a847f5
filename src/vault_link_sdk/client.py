"""
Vault Link Client

Entry point that ties a transport, a token session and login connectors
together for a single Vault server.
"""

import logging
from typing import Optional

import httpx

from .auth import LoginCredential, TokenCredential
from .config import ClientConfig
from .connector import LoginConnector
from .models import Token
from .session import TokenSession
from .transport import HttpTransport

logger = logging.getLogger(__name__)


class VaultLinkClient:
    """
    Connection to one Vault server.

    The token held by :attr:`session` authorizes every call made through
    :attr:`transport`. Replacing it affects all calls dispatched afterward,
    so use one client per identity when several tokens are needed.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Vault Link client.

        Args:
            config: Optional client configuration
            transport: Optional httpx transport, mainly for tests
        """
        self.config = config or ClientConfig()
        self.transport = HttpTransport(self.config, transport=transport)
        self.session = TokenSession(self.transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        """Close the async HTTP client."""
        await self.transport.aclose()

    @property
    def token(self) -> Optional[Token]:
        return self.session.active_token

    def connector(self, credential: LoginCredential, description: str = "") -> LoginConnector:
        """Create a login connector bound to this client."""
        return LoginConnector(self.transport, self.session, credential, description)

    async def login(self, credential: LoginCredential, description: str = "") -> bool:
        """
        Log in with ``credential`` and make the resulting token active.

        Returns:
            True on success, False if Vault refused the credential.
        """
        return await self.connector(credential, description).connect()

    async def login_with_token(self, token_id: str) -> bool:
        """Validate an existing token and make it active."""
        return await self.login(TokenCredential(token_id), "Token login")

    def set_token(self, token_id: str) -> Token:
        """
        Make ``token_id`` the active token without asking Vault about it.

        Call :meth:`refresh_token` to fill in the token's details.
        """
        token = Token(id=token_id)
        self.session.set_active_token(token)
        return token

    async def refresh_token(self) -> Token:
        """Re-read the active token from Vault."""
        return await self.session.refresh()

    async def renew_token(self, increment: Optional[str] = None) -> Token:
        """Renew the active token."""
        return await self.session.renew(increment)

    async def revoke_token(self) -> None:
        """Revoke the active token. No further calls will be authorized."""
        await self.session.revoke()
