"""
HTTP transport shared by every Vault Link operation.
"""

import json
import logging
import ssl
import threading
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx

from .classifier import classify_error
from .config import ClientConfig
from .envelope import ResponseEnvelope
from .exceptions import (
    ConnectionError as VaultConnectionError,
    NotFoundError,
    RequestTimeoutError,
)

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Vault-Token"
NAMESPACE_HEADER = "X-Vault-Namespace"

RequestBody = Union[Mapping[str, Any], str, None]


class HttpTransport:
    """
    Issues authenticated GET/POST/DELETE/LIST calls against a Vault server.

    Every call carries the currently active token. Successful responses are
    returned as :class:`ResponseEnvelope` objects; failures are raised as the
    matching exception from :mod:`vault_link_sdk.exceptions`. This layer
    never retries.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the transport.

        Args:
            config: Client configuration
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``
        """
        self.config = config or ClientConfig()

        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            limits=httpx.Limits(
                max_keepalive_connections=self.config.max_connections,
                max_connections=self.config.max_connections,
            ),
            verify=self._build_verify(),
            transport=transport,
        )

        self._header_lock = threading.Lock()
        self._auth_headers: Mapping[str, str] = self._build_auth_headers("")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self._client.aclose()

    def _build_verify(self) -> Union[bool, ssl.SSLContext]:
        """Return the TLS settings for httpx; a context only when files are involved."""
        if not self.config.ca_bundle and not self.config.client_cert:
            return self.config.verify_ssl

        context = ssl.create_default_context(cafile=self.config.ca_bundle)
        if not self.config.verify_ssl:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        if self.config.client_cert:
            context.load_cert_chain(self.config.client_cert, self.config.client_key)
        return context

    @property
    def client_cert(self) -> Optional[str]:
        return self.config.client_cert

    # Token header handling

    def _build_auth_headers(self, token_id: str) -> Mapping[str, str]:
        headers: Dict[str, str] = {}
        if token_id:
            headers[TOKEN_HEADER] = token_id
        if self.config.namespace:
            headers[NAMESPACE_HEADER] = self.config.namespace
        return MappingProxyType(headers)

    def set_token_header(self, token_id: Optional[str]) -> None:
        """Replace the token attached to every subsequently dispatched call."""
        headers = self._build_auth_headers(token_id or "")
        with self._header_lock:
            self._auth_headers = headers

    @property
    def token_id(self) -> str:
        return self._auth_headers.get(TOKEN_HEADER, "")

    # Request dispatch

    def _url(self, path: str) -> str:
        return f"/{self.config.api_version}/{path.lstrip('/')}"

    @staticmethod
    def _serialize_body(body: RequestBody) -> Optional[str]:
        if body is None:
            return None
        if isinstance(body, str):
            return body
        return json.dumps(dict(body), separators=(",", ":"))

    async def _make_request(
        self,
        method: str,
        path: str,
        description: str = "",
        params: Optional[Mapping[str, Any]] = None,
        body: RequestBody = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> ResponseEnvelope:
        """Send one request and turn the reply into an envelope or an exception."""
        url = self._url(path)

        # Snapshot of the auth headers taken once, at dispatch.
        request_headers = dict(self._auth_headers)
        if headers:
            request_headers.update(headers)

        content = self._serialize_body(body)
        if content is not None:
            request_headers["Content-Type"] = "application/json"

        if self.config.log_requests:
            logger.debug(f"{method} {url} params={dict(params or {})} ({description or 'no description'})")

        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                content=content,
                headers=request_headers,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {method} {url}: {e}")
            raise RequestTimeoutError(f"Request to Vault timed out: {method} {url}")
        except httpx.RequestError as e:
            logger.error(f"Request failed: {method} {url}: {e}")
            raise VaultConnectionError(f"Failed to connect to Vault: {e}")

        if self.config.log_responses:
            logger.debug(f"{method} {url} -> HTTP {response.status_code}")

        return self._handle_response(response, description)

    def _handle_response(self, response: httpx.Response, description: str = "") -> ResponseEnvelope:
        """Return an envelope for 2xx replies, raise the classified error otherwise."""
        if 200 <= response.status_code < 300:
            envelope = ResponseEnvelope.from_body(response.status_code, response.text)
            for warning in envelope.warnings:
                logger.warning(f"Vault warning for {response.request.url.path}: {warning}")
            return envelope

        error = classify_error(response.status_code, response.text, description)
        logger.debug(f"Vault returned HTTP {response.status_code}: {error.message}")
        raise error

    async def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        description: str = "",
        headers: Optional[Mapping[str, str]] = None,
    ) -> ResponseEnvelope:
        """Issue a GET request."""
        return await self._make_request("GET", path, description, params=params, headers=headers)

    async def post(
        self,
        path: str,
        body: RequestBody = None,
        description: str = "",
        headers: Optional[Mapping[str, str]] = None,
    ) -> ResponseEnvelope:
        """Issue a POST request with a JSON body."""
        return await self._make_request("POST", path, description, body=body, headers=headers)

    async def delete(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        description: str = "",
        body: RequestBody = None,
    ) -> ResponseEnvelope:
        """Issue a DELETE request, optionally with a JSON body."""
        return await self._make_request("DELETE", path, description, params=params, body=body)

    async def list(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        description: str = "",
    ) -> List[str]:
        """
        List the keys stored below ``path``.

        A path with nothing below it (HTTP 404) yields an empty list.
        """
        query = dict(params or {})
        query["list"] = "true"
        try:
            envelope = await self._make_request("GET", path, description, params=query)
        except NotFoundError:
            logger.debug(f"Nothing to list at {path}")
            return []
        if not envelope.has_data:
            return []
        return envelope.get_list(str, "data.keys")
