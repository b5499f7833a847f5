"""
Shared fixtures: an in-memory stand-in for a Vault server.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest
import pytest_asyncio

from vault_link_sdk import ClientConfig, VaultLinkClient

Handler = Callable[[httpx.Request], Union[httpx.Response, Any]]


class FakeVault:
    """Route table keyed by (method, path) that records every request."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        body: Optional[Any] = None,
        text: Optional[str] = None,
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            if body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=body)

        self.routes[(method, path)] = handler

    def add_handler(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, path)] = handler

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"errors": []})
        response = handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    def tokens_seen(self) -> List[Optional[str]]:
        return [r.headers.get("X-Vault-Token") for r in self.requests]


def token_lookup_body(token_id: str = "s.root-token", **overrides: Any) -> Dict[str, Any]:
    data = {
        "accessor": "accessor-root",
        "creation_time": 1700000000,
        "creation_ttl": 0,
        "display_name": "root",
        "entity_id": "",
        "expire_time": None,
        "explicit_max_ttl": 0,
        "id": token_id,
        "meta": None,
        "num_uses": 0,
        "orphan": True,
        "path": "auth/token/root",
        "policies": ["root"],
        "renewable": False,
        "ttl": 0,
        "type": "service",
    }
    data.update(overrides)
    return {"request_id": "b5c6", "lease_id": "", "data": data, "warnings": None, "auth": None}


def login_body(client_token: str = "s.login-token", **overrides: Any) -> Dict[str, Any]:
    auth = {
        "client_token": client_token,
        "accessor": "accessor-login",
        "policies": ["default", "app"],
        "token_policies": ["default", "app"],
        "identity_policies": None,
        "metadata": {"role_name": "app"},
        "lease_duration": 2764800,
        "renewable": True,
        "entity_id": "entity-1",
        "token_type": "service",
    }
    auth.update(overrides)
    return {"request_id": "a1b2", "data": None, "warnings": None, "auth": auth}


@pytest.fixture
def fake_vault():
    return FakeVault()


@pytest.fixture
def client_config():
    return ClientConfig(
        base_url="http://vault.test:8200",
        timeout=5,
        max_connections=5,
        verify_ssl=False,
    )


@pytest_asyncio.fixture
async def client(fake_vault, client_config):
    async with VaultLinkClient(client_config, transport=httpx.MockTransport(fake_vault)) as client:
        yield client


@pytest.fixture
def lookup_body():
    return token_lookup_body


@pytest.fixture
def auth_body():
    return login_body
