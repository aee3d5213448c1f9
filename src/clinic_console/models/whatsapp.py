"""
WhatsApp gateway sessions and their mirror records in the clinic backend.

Gateway payloads are snake_case, backend payloads camelCase.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .common import BackendModel
from .enums import WhatsAppSessionStatus

TERMINAL_SESSION_STATUSES = frozenset({WhatsAppSessionStatus.LOGGED_IN, WhatsAppSessionStatus.ERROR})


class WhatsAppSession(BaseModel):
    """Session as reported by the WhatsApp gateway."""
    id: str
    session_name: Optional[str] = None
    phone_number: Optional[str] = None
    status: WhatsAppSessionStatus = WhatsAppSessionStatus.INITIALIZING
    last_active: Optional[str] = None
    created_at: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self.status == WhatsAppSessionStatus.LOGGED_IN


class WhatsAppQRCode(BaseModel):
    """Base64 encoded QR image for linking a phone."""
    qr_code: Optional[str] = None
    qr_data: Optional[str] = None
    session_id: Optional[str] = None
    expires_at: Optional[str] = None

    @property
    def image(self) -> Optional[str]:
        # The gateway has shipped both field names
        return self.qr_code or self.qr_data


class WhatsAppLogin(BaseModel):
    access_token: str
    token_type: str = "bearer"


class SendMessageResult(BaseModel):
    success: bool = True
    message: Optional[str] = None
    session_id: Optional[str] = None
    recipient: Optional[str] = None


class BackendWhatsAppIntegration(BackendModel):
    """The backend's bookkeeping copy of a gateway session."""
    id: str
    session_id: str = Field(..., alias="sessionId")
    session_name: Optional[str] = Field(None, alias="sessionName")
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    status: Optional[str] = None
    is_default: bool = Field(False, alias="isDefault")
    last_active: Optional[str] = Field(None, alias="lastActive")
    error_message: Optional[str] = Field(None, alias="errorMessage")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class IntegrationStatus(BackendModel):
    has_integration: bool = Field(False, alias="hasIntegration")
    has_active_integration: bool = Field(False, alias="hasActiveIntegration")
    total_integrations: int = Field(0, alias="totalIntegrations")


class CombinedSession(WhatsAppSession):
    """Gateway session with the matching mirror record's id and default flag."""
    backend_id: Optional[str] = None
    is_default: bool = False
