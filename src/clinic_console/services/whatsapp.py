"""
WhatsApp Integration Service

The clinic backend keeps a bookkeeping copy of each gateway session so other
features (appointment reminders, bill sharing) can find the active number.
The gateway stays the source of truth.
"""

import logging
from typing import Optional, List, Dict, Any

from clinic_console.core.exceptions import ApiError
from clinic_console.infrastructure.http_client import ApiClient, unwrap
from clinic_console.models.whatsapp import BackendWhatsAppIntegration, IntegrationStatus

logger = logging.getLogger(__name__)


def _without_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    # Unset fields are omitted, never sent as null
    return {key: value for key, value in payload.items() if value is not None}


class WhatsAppIntegrationService:
    def __init__(self, api: ApiClient):
        self.api = api

    @staticmethod
    def _integration(body: Any) -> Optional[BackendWhatsAppIntegration]:
        data = unwrap(body, "integration")
        return BackendWhatsAppIntegration(**data) if data else None

    async def list_integrations(self) -> List[BackendWhatsAppIntegration]:
        body = await self.api.get("/whatsapp")
        return [BackendWhatsAppIntegration(**item) for item in unwrap(body, "integrations", default=[])]

    async def status(self) -> IntegrationStatus:
        body = await self.api.get("/whatsapp/status")
        return IntegrationStatus(**unwrap(body, default={}))

    async def active(self) -> Optional[BackendWhatsAppIntegration]:
        """The integration used for outgoing messages, or None if there is none."""
        try:
            body = await self.api.get("/whatsapp/active")
        except ApiError as e:
            logger.debug(f"No active WhatsApp integration: {e.message}")
            return None
        return self._integration(body)

    async def create_integration(
        self,
        session_id: str,
        session_name: str,
        status: str,
        whatsapp_api_email: Optional[str] = None
    ) -> Optional[BackendWhatsAppIntegration]:
        payload = _without_none({
            "sessionId": session_id,
            "sessionName": session_name,
            "status": status,
            "whatsappApiEmail": whatsapp_api_email,
        })
        body = await self.api.post("/whatsapp", payload)
        return self._integration(body)

    async def update_integration(
        self,
        integration_id: str,
        session_name: Optional[str] = None,
        phone_number: Optional[str] = None,
        status: Optional[str] = None,
        error_message: Optional[str] = None
    ) -> Optional[BackendWhatsAppIntegration]:
        payload: Dict[str, Any] = {
            "sessionName": session_name,
            "phoneNumber": phone_number,
            "status": status,
            "errorMessage": error_message,
        }
        payload = _without_none(payload)
        body = await self.api.put(f"/whatsapp/{integration_id}", payload)
        return self._integration(body)

    async def sync_status(
        self,
        integration_id: str,
        status: str,
        phone_number: Optional[str] = None,
        error_message: Optional[str] = None
    ) -> Optional[BackendWhatsAppIntegration]:
        body = await self.api.patch(f"/whatsapp/{integration_id}/sync", _without_none({
            "status": status,
            "phoneNumber": phone_number,
            "errorMessage": error_message,
        }))
        return self._integration(body)

    async def set_default(self, integration_id: str) -> Optional[BackendWhatsAppIntegration]:
        body = await self.api.patch(f"/whatsapp/{integration_id}/default")
        logger.info(f"WhatsApp integration {integration_id} is now the default")
        return self._integration(body)

    async def delete_integration(self, integration_id: str):
        await self.api.delete(f"/whatsapp/{integration_id}")
