"""
Login state machine turning a credential into an active token session.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

from .auth import LoginCredential
from .exceptions import ForbiddenError
from .models import LoginResponse, Token
from .session import TokenSession
from .transport import HttpTransport

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    """State of a login connector."""
    NOT_CONNECTED = "not_connected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


class LoginConnector:
    """
    Drives a credential through a login attempt.

    ``NOT_CONNECTED -> CONNECTING -> CONNECTED | FAILED``. A connector can be
    reused; each :meth:`connect` call re-enters ``CONNECTING``. A forbidden
    response ends the attempt in ``FAILED`` without raising; any other error
    ends it in ``FAILED`` and propagates.
    """

    def __init__(
        self,
        transport: HttpTransport,
        session: TokenSession,
        credential: LoginCredential,
        description: str = "",
    ):
        self.transport = transport
        self.session = session
        self.credential = credential
        self.description = description or type(credential).__name__
        self.state = ConnectionState.NOT_CONNECTED
        self.response: Optional[LoginResponse] = None
        self.last_error: Optional[Exception] = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED

    def _transition(self, state: ConnectionState) -> None:
        logger.info(f"{self.description}: {self.state.value} -> {state.value}")
        self.state = state

    async def connect(self, set_vault_token: bool = True) -> bool:
        """
        Perform the login.

        Args:
            set_vault_token: If True, the session's active token is replaced by
                the token the login produced.

        Returns:
            True if the login succeeded, False if Vault refused it.
        """
        async with self._lock:
            self._transition(ConnectionState.CONNECTING)
            self.response = None
            self.last_error = None

            try:
                mount_path = self.credential.get_authentication_mount_path()
                parameters = self.credential.build_login_parameters()
                response = await self.credential.perform_connection(
                    self.transport, mount_path, parameters, self.description
                )
            except ForbiddenError as e:
                logger.warning(f"{self.description}: login refused: {e.message}")
                self.last_error = e
                self._transition(ConnectionState.FAILED)
                return False
            except BaseException as e:
                self.last_error = e
                self._transition(ConnectionState.FAILED)
                raise

            if response is None or not response.client_token:
                self._transition(ConnectionState.FAILED)
                return False

            self.response = response
            if set_vault_token:
                self.session.set_active_token(Token.from_login_response(response))
            self._transition(ConnectionState.CONNECTED)
            return True
