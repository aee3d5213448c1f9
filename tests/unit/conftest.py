"""
Shared fixtures: an in-memory credential store and a fake HTTP server that
stands in for both the clinic backend and the WhatsApp gateway.
"""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from clinic_console.core.credential_store import CredentialStore, InMemoryBackend
from clinic_console.core.navigation import Navigator
from clinic_console.services.console import ClinicConsole

API_URL = "http://api.test/api"
GATEWAY_URL = "http://wa.test"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeServer:
    """Routes requests by method and URL (query string ignored) and records them."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.calls: List[httpx.Request] = []

    def on(self, method: str, url: str, json: Any = None, status: int = 200, handler: Optional[Handler] = None):
        self.routes[(method, url)] = handler or (lambda request: httpx.Response(status, json=json))

    def api(self, method: str, path: str, **kwargs):
        self.on(method, API_URL + path, **kwargs)

    def gateway(self, method: str, path: str, **kwargs):
        self.on(method, GATEWAY_URL + path, **kwargs)

    def sequence(self, method: str, url: str, responses: List[httpx.Response]):
        """Serve responses in order, repeating the last one."""
        pending = list(responses)

        def handler(request):
            return pending.pop(0) if len(pending) > 1 else pending[0]

        self.on(method, url, handler=handler)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        route = self.routes.get((request.method, url))
        if route is None:
            return httpx.Response(404, json={"error": f"No route for {request.method} {url}"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def calls_to(self, method: str, url: str) -> List[httpx.Request]:
        return [
            call for call in self.calls
            if call.method == method and f"{call.url.scheme}://{call.url.host}{call.url.path}" == url
        ]

    def call_order(self) -> List[str]:
        return [f"{call.method} {call.url.host}{call.url.path}" for call in self.calls]


def body_of(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


def ok(data: Any = None, **extra) -> Dict[str, Any]:
    """Backend success envelope."""
    body = {"success": True, **extra}
    if data is not None:
        body["data"] = data
    return body


def raise_connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def store():
    return CredentialStore(InMemoryBackend())


@pytest.fixture
def navigator():
    return Navigator(pathname="/dashboard")


@pytest.fixture
def console(server, store, navigator):
    return ClinicConsole(
        store=store,
        navigator=navigator,
        api_url=API_URL,
        whatsapp_url=GATEWAY_URL,
        transport=server.transport
    )
