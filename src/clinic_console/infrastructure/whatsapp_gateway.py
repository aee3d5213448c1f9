"""
WhatsApp Gateway Client

Talks to the standalone WhatsApp gateway service. The gateway has its own
accounts and issues its own bearer token (stored as whatsappToken), separate
from the clinic backend session.
"""

import logging
import mimetypes
from pathlib import Path
from typing import List, Optional

import httpx

from clinic_console.core.config import settings
from clinic_console.core.credential_store import CredentialStore, WHATSAPP_TOKEN_KEY, WHATSAPP_EMAIL_KEY
from clinic_console.infrastructure.http_client import HttpClient
from clinic_console.models.whatsapp import (
    WhatsAppSession,
    WhatsAppQRCode,
    WhatsAppLogin,
    SendMessageResult,
)

logger = logging.getLogger(__name__)


class WhatsAppGatewayClient:
    """Client for the WhatsApp gateway API."""

    def __init__(
        self,
        store: CredentialStore,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the gateway client.

        Args:
            store: Credential store holding the gateway token
            base_url: Base URL of the gateway
            timeout: Request timeout in seconds (QR generation can be slow)
            transport: Optional httpx transport, used by tests
        """
        self.store = store
        self.http = HttpClient(
            base_url=base_url or settings.whatsapp_api_url,
            store=store,
            token_key=WHATSAPP_TOKEN_KEY,
            timeout=timeout or settings.whatsapp_timeout,
            transport=transport
        )
        logger.debug(f"WhatsAppGatewayClient initialized with base_url: {self.http.base_url}")

    # --- Account ---

    async def login(self, email: str, password: str) -> WhatsAppLogin:
        """Log in to the gateway and store its access token."""
        body = await self.http.post("/api/auth/login", {"email": email, "password": password})
        result = WhatsAppLogin(**body)
        if result.access_token:
            self.store.set(WHATSAPP_TOKEN_KEY, result.access_token)
            self.store.set(WHATSAPP_EMAIL_KEY, email)
            logger.info(f"✅ Logged in to WhatsApp gateway as {email}")
        return result

    async def register(self, email: str, password: str, name: str) -> dict:
        """Create a gateway account. The caller logs in afterwards."""
        body = await self.http.post(
            "/api/auth/register",
            {"email": email, "password": password, "name": name}
        )
        logger.info(f"✅ Registered WhatsApp gateway account {email}")
        return body

    def logout(self):
        self.store.remove(WHATSAPP_TOKEN_KEY, WHATSAPP_EMAIL_KEY)

    def is_authenticated(self) -> bool:
        return self.store.has(WHATSAPP_TOKEN_KEY)

    def get_token(self) -> Optional[str]:
        return self.store.get(WHATSAPP_TOKEN_KEY)

    def get_email(self) -> Optional[str]:
        """The gateway account email from the last login."""
        return self.store.get(WHATSAPP_EMAIL_KEY)

    # --- Sessions ---

    async def list_sessions(self) -> List[WhatsAppSession]:
        body = await self.http.get("/api/whatsapp/sessions")
        if not isinstance(body, list):
            return []
        return [WhatsAppSession(**item) for item in body]

    async def create_session(self, session_name: str) -> WhatsAppSession:
        body = await self.http.post("/api/whatsapp/sessions", {"session_name": session_name})
        session = WhatsAppSession(**body)
        logger.info(f"✅ Created WhatsApp session {session.id} ({session_name})")
        return session

    async def get_qr_code(self, session_id: str) -> WhatsAppQRCode:
        body = await self.http.post(f"/api/whatsapp/sessions/{session_id}/qr")
        return WhatsAppQRCode(**body)

    async def get_session_status(self, session_id: str) -> WhatsAppSession:
        body = await self.http.get(f"/api/whatsapp/sessions/{session_id}/status")
        if "id" not in body:
            body = {**body, "id": session_id}
        return WhatsAppSession(**body)

    async def delete_session(self, session_id: str) -> dict:
        body = await self.http.delete(f"/api/whatsapp/sessions/{session_id}")
        logger.info(f"✅ Deleted WhatsApp session {session_id}")
        return body

    # --- Messaging ---

    async def send_message(self, session_id: str, phone_number: str, message: str) -> SendMessageResult:
        body = await self.http.post("/api/whatsapp/send", {
            "session_id": session_id,
            "phone_number": phone_number,
            "message": message,
        })
        logger.info(f"✅ WhatsApp message sent to {phone_number}")
        return SendMessageResult(**body)

    async def send_with_file(
        self,
        session_id: str,
        phone_number: str,
        file_path: str,
        caption: Optional[str] = None
    ) -> SendMessageResult:
        """Send a document or image as a multipart upload."""
        path = Path(file_path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        form = {"session_id": session_id, "phone_number": phone_number}
        if caption:
            form["caption"] = caption

        body = await self.http.request(
            "POST",
            "/api/whatsapp/send-with-file",
            data=form,
            files={"file": (path.name, path.read_bytes(), content_type)}
        )
        logger.info(f"✅ WhatsApp file {path.name} sent to {phone_number}")
        return SendMessageResult(**body)
