"""
Auth Service

Signup, activation and login against the clinic backend. Successful
activation and login store the token, user and tenant in the credential store.
"""

import logging
from typing import Optional

from clinic_console.core.credential_store import AUTH_TOKEN_KEY, AUTH_USER_KEY, TENANT_KEY
from clinic_console.core.exceptions import ApiError
from clinic_console.infrastructure.http_client import ApiClient, session_data, unwrap
from clinic_console.models.auth import User, Tenant, LoginResult, ActivationTarget

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, api: ApiClient):
        self.api = api
        self.store = api.store

    async def signup(self, email: str, owner_name: str, phone: Optional[str] = None) -> dict:
        """Start a free trial. The backend emails an activation link."""
        payload = {"email": email, "ownerName": owner_name}
        if phone:
            payload["phone"] = phone
        body = await self.api.post("/auth/signup", payload)
        logger.info(f"Signup requested for {email}")
        return unwrap(body, default={})

    async def activate(self, token: str, password: str) -> LoginResult:
        """Activate the account, set its password and start a session."""
        body = await self.api.post("/auth/activate", {"token": token, "password": password})
        return self._store_session(body)

    async def verify_token(self, token: str) -> ActivationTarget:
        body = await self.api.get(f"/auth/verify-token/{token}")
        return ActivationTarget(**unwrap(body, default={}))

    async def login(self, email: str, password: str) -> LoginResult:
        body = await self.api.post("/auth/login", {"email": email, "password": password})
        result = self._store_session(body)
        logger.info(f"✅ Logged in as {result.user.email} ({result.tenant.tenant_id})")
        return result

    async def verify(self) -> dict:
        """Check the stored token; returns {user, tenant}."""
        body = await self.api.get("/auth/verify")
        data = unwrap(body, default={})
        return {
            "user": User(**data["user"]) if data.get("user") else None,
            "tenant": Tenant(**data["tenant"]) if data.get("tenant") else None,
        }

    async def resend_activation(self, email: str) -> str:
        body = await self.api.post("/auth/resend-activation", {"email": email})
        return body.get("message", "") if isinstance(body, dict) else ""

    def logout(self):
        self.store.clear_session()

    def get_token(self) -> Optional[str]:
        return self.store.get(AUTH_TOKEN_KEY)

    def get_user(self) -> Optional[User]:
        data = self.store.get_json(AUTH_USER_KEY)
        return User(**data) if data else None

    def get_tenant(self) -> Optional[Tenant]:
        data = self.store.get_json(TENANT_KEY)
        return Tenant(**data) if data else None

    def is_authenticated(self) -> bool:
        return self.store.has(AUTH_TOKEN_KEY)

    def _store_session(self, body: dict) -> LoginResult:
        data = session_data(body)
        try:
            result = LoginResult(**data)
        except ValueError as e:
            logger.error(f"❌ Malformed session response: {e}")
            raise ApiError("Unexpected response from server: incomplete session", payload=body) from e
        self.store.set(AUTH_TOKEN_KEY, result.token)
        self.store.set_json(AUTH_USER_KEY, result.user.model_dump(by_alias=True, mode="json"))
        self.store.set_json(TENANT_KEY, result.tenant.model_dump(by_alias=True, mode="json"))
        return result
