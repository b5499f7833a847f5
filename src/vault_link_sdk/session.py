"""
Ownership of the active Vault token.
"""

import logging
import threading
from typing import Any, Dict, Optional

from .models import Token
from .transport import HttpTransport

logger = logging.getLogger(__name__)

TOKEN_MOUNT_PATH = "auth/token"


class TokenSession:
    """
    Holds the token used to authorize every call made through a transport.

    The token and the transport's auth header are always replaced together,
    so a call sees either the old token or the new one, never a mix.
    """

    def __init__(self, transport: HttpTransport, token: Optional[Token] = None):
        self._transport = transport
        self._lock = threading.Lock()
        self._active_token: Optional[Token] = None
        if token is not None:
            self.set_active_token(token)

    @property
    def active_token(self) -> Optional[Token]:
        return self._active_token

    @property
    def token_id(self) -> str:
        token = self._active_token
        return token.id if token is not None else ""

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token_id)

    def set_active_token(self, token: Token) -> None:
        """Make ``token`` the one used by every call dispatched after this returns."""
        with self._lock:
            self._active_token = token
            self._transport.set_token_header(token.id)
        logger.info(f"Active token replaced (accessor={token.accessor or 'unknown'})")

    def clear(self) -> None:
        """Forget the active token."""
        with self._lock:
            self._active_token = None
            self._transport.set_token_header("")

    async def lookup_self(self) -> Token:
        """Read the active token's record from Vault without touching the session."""
        envelope = await self._transport.get(
            f"{TOKEN_MOUNT_PATH}/lookup-self", description="Token lookup-self"
        )
        token = envelope.get_vault_typed_object(Token)
        token.read_from_vault = True
        return token

    async def refresh(self) -> Token:
        """
        Re-read the active token from Vault and update it in place.

        The token's id, accessor and creation time are kept; mutable fields
        such as policies, TTL and remaining uses are refreshed. If the call
        is cancelled or fails the session is left as it was.

        Returns:
            The active token
        """
        current = self._active_token
        fresh = await self.lookup_self()

        with self._lock:
            if self._active_token is not current:
                # Swapped while the lookup was in flight; the record is stale.
                logger.debug("Active token replaced during refresh, discarding lookup result")
                return self._active_token
            if current is None:
                self._active_token = fresh
                self._transport.set_token_header(fresh.id)
                return fresh
            current.update_from(fresh)
            return current

    async def renew(self, increment: Optional[str] = None) -> Token:
        """
        Renew the active token, then refresh it.

        Args:
            increment: Requested lease extension, e.g. ``"1h"``. Vault may not honor it.
        """
        body: Dict[str, Any] = {}
        if increment:
            body["increment"] = increment
        await self._transport.post(
            f"{TOKEN_MOUNT_PATH}/renew-self", body, description="Token renew-self"
        )
        return await self.refresh()

    async def revoke(self) -> None:
        """Revoke the active token in Vault and clear the session."""
        await self._transport.post(
            f"{TOKEN_MOUNT_PATH}/revoke-self", description="Token revoke-self"
        )
        self.clear()
        logger.info("Active token revoked")
