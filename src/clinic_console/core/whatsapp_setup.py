"""
WhatsApp setup wizard.

Walks an operator through connecting a phone to the clinic:

    auth -> create -> qr -> success

Every change is written to the WhatsApp gateway first and mirrored to the
clinic backend second. Mirror failures are logged and never undo or block the
gateway change.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from .config import settings
from .exceptions import ApiError, ValidationError
from clinic_console.models.enums import SetupStep, WhatsAppSessionStatus
from clinic_console.models.whatsapp import CombinedSession

logger = logging.getLogger(__name__)

GATEWAY_AUTH_ERRORS = ("Could not validate", "Not authenticated")
DEFAULT_CONNECTION_ERROR = "Connection failed"


@dataclass
class PollResult:
    """Outcome of waiting for a QR scan."""
    status: Optional[str] = None
    phone_number: Optional[str] = None
    error_message: Optional[str] = None
    timed_out: bool = False
    attempts: int = 0

    @property
    def connected(self) -> bool:
        return self.status == WhatsAppSessionStatus.LOGGED_IN.value


class WhatsAppSetupWizard:
    """
    Stateful connect flow over the gateway client and the backend mirror.

    `sleep` and `clock` are injectable so the polling loop can run on a fake
    clock.
    """

    def __init__(
        self,
        gateway,
        integrations,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        poll_interval: Optional[float] = None,
        poll_timeout: Optional[float] = None
    ):
        self.gateway = gateway
        self.integrations = integrations
        self._sleep = sleep
        self._clock = clock
        self.poll_interval = poll_interval or settings.whatsapp_poll_interval
        self.poll_timeout = poll_timeout or settings.whatsapp_poll_timeout

        self.step = SetupStep.CREATE if gateway.is_authenticated() else SetupStep.AUTH
        self.email: Optional[str] = gateway.get_email()
        self.session_id: Optional[str] = None
        self.backend_id: Optional[str] = None
        self.qr_code: Optional[str] = None
        self.session_status: str = WhatsAppSessionStatus.PENDING_QR.value

    # --- Step 1: gateway account ---

    async def authenticate(
        self,
        mode: str,
        email: str,
        password: str,
        name: Optional[str] = None
    ):
        """
        Register or log in to the gateway.

        Registering does not log in; the wizard stays on the auth step in login
        mode. A successful login moves on to session creation.
        """
        if mode == "register":
            if not name:
                raise ValidationError("Name is required to register")
            await self.gateway.register(email, password, name)
            logger.info("Registration successful, please log in")
            return "login"
        if mode != "login":
            raise ValueError(f"Unknown auth mode: {mode}")

        await self.gateway.login(email, password)
        self.email = email
        self.step = SetupStep.CREATE
        return "create"

    # --- Step 2: session ---

    async def create_session(self, session_name: str):
        if not session_name.strip():
            raise ValidationError("Please enter a session name")

        session = await self.gateway.create_session(session_name)
        self.session_id = session.id
        self.backend_id = None

        try:
            integration = await self.integrations.create_integration(
                session.id,
                session_name,
                session.status.value,
                self.email
            )
            self.backend_id = integration.id if integration else None
        except ApiError as e:
            logger.error(f"❌ Failed to store integration in backend: {e.message}")

        self.step = SetupStep.QR
        return session

    async def resume_session(self, session_id: str) -> CombinedSession:
        """
        Re-link an existing gateway session, e.g. one left in pending_qr or
        logged_out. The backend record is found through list_sessions so the
        poll result is still mirrored.
        """
        sessions = await self.list_sessions()
        if not self.gateway.is_authenticated():
            raise ValidationError("WhatsApp gateway login expired, please log in again")
        session = next((s for s in sessions if s.id == session_id), None)
        if session is None:
            raise ValidationError(f"WhatsApp session {session_id} not found")

        self.session_id = session.id
        self.backend_id = session.backend_id
        self.qr_code = None
        self.session_status = session.status.value
        self.step = SetupStep.QR
        logger.info(f"Reconnecting WhatsApp session {session.id}")
        return session

    # --- Step 3: QR ---

    async def fetch_qr(self) -> Optional[str]:
        if not self.session_id:
            raise ValidationError("Create a session first")
        qr = await self.gateway.get_qr_code(self.session_id)
        self.qr_code = qr.image
        return self.qr_code

    async def poll_status(
        self,
        on_status: Optional[Callable[[str], None]] = None
    ) -> PollResult:
        """
        Poll the gateway until the phone is linked, the session errors, or the
        poll timeout elapses. Failed polls are ignored.
        """
        if not self.session_id:
            raise ValidationError("Create a session first")

        result = PollResult()
        started = self._clock()
        while True:
            await self._sleep(self.poll_interval)
            if self._clock() - started >= self.poll_timeout:
                logger.warning(f"Stopped polling session {self.session_id} after {self.poll_timeout}s")
                result.timed_out = True
                return result

            result.attempts += 1
            try:
                session = await self.gateway.get_session_status(self.session_id)
            except ApiError as e:
                logger.debug(f"Status poll {result.attempts} failed, continuing: {e.message}")
                continue

            status = session.status.value
            self.session_status = status
            result.status = status
            if on_status:
                on_status(status)

            if session.status == WhatsAppSessionStatus.LOGGED_IN:
                result.phone_number = session.phone_number
                await self._sync_mirror(WhatsAppSessionStatus.LOGGED_IN.value, phone_number=session.phone_number)
                self.step = SetupStep.SUCCESS
                logger.info(f"✅ WhatsApp connected: {session.phone_number or self.session_id}")
                return result

            if session.status == WhatsAppSessionStatus.ERROR:
                result.error_message = session.error_message or DEFAULT_CONNECTION_ERROR
                await self._sync_mirror(WhatsAppSessionStatus.ERROR.value, error_message=result.error_message)
                logger.error(f"❌ WhatsApp session {self.session_id} failed: {result.error_message}")
                return result

    async def _sync_mirror(
        self,
        status: str,
        phone_number: Optional[str] = None,
        error_message: Optional[str] = None
    ):
        if not self.backend_id:
            return
        try:
            await self.integrations.sync_status(
                self.backend_id,
                status,
                phone_number=phone_number,
                error_message=error_message
            )
        except ApiError as e:
            logger.error(f"❌ Failed to sync {status} status with backend: {e.message}")

    # --- Session management ---

    async def list_sessions(self) -> List[CombinedSession]:
        """
        Gateway sessions joined with their backend records by session id.

        A rejected gateway token logs the gateway user out and yields no sessions.
        """
        try:
            sessions = await self.gateway.list_sessions()
        except ApiError as e:
            if any(marker in e.message for marker in GATEWAY_AUTH_ERRORS):
                logger.warning("WhatsApp gateway token rejected, logging out")
                self.gateway.logout()
                self.step = SetupStep.AUTH
                return []
            raise

        try:
            mirror = await self.integrations.list_integrations()
        except ApiError as e:
            logger.error(f"❌ Failed to load backend integrations: {e.message}")
            mirror = []

        by_session = {record.session_id: record for record in mirror}
        combined = []
        for session in sessions:
            match = by_session.get(session.id)
            combined.append(CombinedSession(
                **session.model_dump(),
                backend_id=match.id if match else None,
                is_default=match.is_default if match else False
            ))
        return combined

    async def delete_session(self, session_id: str, backend_id: Optional[str] = None):
        await self.gateway.delete_session(session_id)
        if backend_id:
            try:
                await self.integrations.delete_integration(backend_id)
            except ApiError as e:
                logger.error(f"❌ Failed to delete integration from backend: {e.message}")

    def logout(self):
        self.gateway.logout()
        self.step = SetupStep.AUTH

    def reset(self):
        self.step = SetupStep.CREATE if self.gateway.is_authenticated() else SetupStep.AUTH
        self.session_id = None
        self.backend_id = None
        self.qr_code = None
        self.session_status = WhatsAppSessionStatus.PENDING_QR.value
        self.email = self.gateway.get_email()
