"""
HTTP client for the clinic backend.

Every service module talks to the backend through ApiClient, which attaches the
stored bearer token, decodes the JSON envelope, normalizes failures into
ApiError and applies the global 401 rule.
"""

import logging
import time
from typing import Dict, Any, Optional

import httpx

from clinic_console.core.config import settings
from clinic_console.core.credential_store import CredentialStore, AUTH_TOKEN_KEY
from clinic_console.core.exceptions import ApiError, MISSING_TOKEN_MESSAGE, NETWORK_ERROR_MESSAGE
from clinic_console.core.navigation import Navigator, LOGIN_PATH

logger = logging.getLogger(__name__)


def clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Drop unset filters and render values the way the backend expects them."""
    cleaned = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned


class HttpClient:
    """Shared request machinery for the backend and the WhatsApp gateway."""

    def __init__(
        self,
        base_url: str,
        store: CredentialStore,
        token_key: str,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.store = store
        self.token_key = token_key
        self.timeout = timeout
        self._transport = transport

    def _get_headers(self, json_body: bool = True) -> Dict[str, str]:
        """Get headers for API requests. The token is read at call time."""
        headers = {"Accept": "application/json"}
        if json_body:
            headers["Content-Type"] = "application/json"
        token = self.store.get(self.token_key)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {"raw": response.text}

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            ApiError: on any non-2xx response or transport failure
        """
        url = f"{self.base_url}{path}"
        start_time = time.perf_counter()
        try:
            async with self._client() as client:
                response = await client.request(
                    method,
                    url,
                    params=clean_params(params),
                    json=json,
                    data=data,
                    files=files,
                    headers=self._get_headers(json_body=files is None)
                )
        except httpx.RequestError as e:
            logger.error(f"❌ {method} {path} failed before a response: {e}")
            raise ApiError(NETWORK_ERROR_MESSAGE, network=True) from e

        latency = (time.perf_counter() - start_time) * 1000
        logger.debug(f"{method} {path} -> {response.status_code} in {latency:.2f}ms")

        body = self._decode(response)
        if response.is_error:
            error = ApiError.from_payload(response.status_code, body)
            logger.error(f"❌ HTTP error {method} {path}: {response.status_code} - {error.message}")
            self._on_error_response(error)
            raise error
        return body

    def _on_error_response(self, error: ApiError):
        """Hook for client-specific error side effects."""

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Any] = None, **kwargs) -> Any:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Optional[Any] = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Optional[Any] = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str, json: Optional[Any] = None) -> Any:
        return await self.request("DELETE", path, json=json)


class ApiClient(HttpClient):
    """
    Client for the clinic backend.

    On a 401 for a tenant-token request the stored tenant session is cleared and
    the navigator is sent to the login screen, unless it is already on login,
    activation or signup.
    """

    def __init__(
        self,
        store: CredentialStore,
        navigator: Optional[Navigator] = None,
        base_url: Optional[str] = None,
        token_key: str = AUTH_TOKEN_KEY,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(
            base_url=base_url or settings.api_base_url,
            store=store,
            token_key=token_key,
            timeout=timeout or settings.api_timeout,
            transport=transport
        )
        self.navigator = navigator or Navigator()
        logger.debug(f"ApiClient initialized with base_url: {self.base_url}")

    def _on_error_response(self, error: ApiError):
        # Super-admin calls carry their own token and leave the tenant session alone
        if error.is_unauthorized and self.token_key == AUTH_TOKEN_KEY:
            self._handle_unauthorized()

    def _handle_unauthorized(self):
        self.store.clear_session()
        if not self.navigator.is_on_auth_page():
            self.navigator.redirect(LOGIN_PATH)

    def scoped(self, token_key: str) -> "ApiClient":
        """Same backend and store, different bearer token (e.g. superAdminToken)."""
        return ApiClient(
            store=self.store,
            navigator=self.navigator,
            base_url=self.base_url,
            token_key=token_key,
            timeout=self.timeout,
            transport=self._transport
        )


def unwrap(body: Any, key: Optional[str] = None, default: Any = None) -> Any:
    """Pull `data` (and optionally `data[key]`) out of a {success, data} envelope."""
    data = body.get("data") if isinstance(body, dict) else None
    if key is None:
        return data if data is not None else default
    if isinstance(data, dict) and data.get(key) is not None:
        return data[key]
    return default


def session_data(body: Any) -> Dict[str, Any]:
    """
    The `data` of a response that opens a session (login, activate, impersonate).

    Raises:
        ApiError: when the envelope carries no token
    """
    data = unwrap(body, default={})
    if not isinstance(data, dict) or not data.get("token"):
        logger.error("❌ Session response without a token")
        raise ApiError(MISSING_TOKEN_MESSAGE, payload=body if isinstance(body, dict) else None)
    return data
