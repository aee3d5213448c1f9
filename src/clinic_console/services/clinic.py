"""
Clinic settings, staff users and dashboard services.
"""

import logging
from typing import Optional, Dict, Any, List, Union

from clinic_console.core.confirmation import require_confirmation
from clinic_console.core.exceptions import ValidationError
from clinic_console.infrastructure.http_client import ApiClient, unwrap
from clinic_console.models.clinic import ClinicSettings, SettingsBundle, StaffUser
from clinic_console.models.dashboard import DashboardStats, DashboardAppointments
from clinic_console.models.enums import UserRole

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def get(self) -> SettingsBundle:
        body = await self.api.get("/settings")
        return SettingsBundle(**unwrap(body, default={}))

    async def update(self, data: Union[ClinicSettings, Dict[str, Any]]) -> ClinicSettings:
        payload = data.to_payload() if isinstance(data, ClinicSettings) else dict(data)
        body = await self.api.put("/settings", payload)
        logger.info("✅ Clinic settings saved")
        return ClinicSettings(**unwrap(body, "settings", default={}))


class UserService:
    """Staff logins within the current tenant."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def list(self) -> List[StaffUser]:
        body = await self.api.get("/users")
        return [StaffUser(**item) for item in unwrap(body, "users", default=[])]

    async def create(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.RECEPTIONIST,
        phone: Optional[str] = None
    ) -> StaffUser:
        if not name.strip():
            raise ValidationError("Name is required")
        if not email.strip():
            raise ValidationError("Email is required")
        if not password:
            raise ValidationError("Password is required for new users")
        payload = {
            "name": name,
            "email": email,
            "role": UserRole(role).value,
            "phone": phone or "",
            "password": password,
        }
        body = await self.api.post("/users", payload)
        user = StaffUser(**unwrap(body, "user", default={"name": name, "email": email, "role": payload["role"]}))
        logger.info(f"✅ User created: {user.email} ({user.role.value})")
        return user

    async def update(
        self,
        user_id: str,
        name: str,
        email: str,
        role: UserRole,
        phone: Optional[str] = None,
        password: Optional[str] = None
    ) -> StaffUser:
        """Update a user. The password is only changed when one is given."""
        if not name.strip():
            raise ValidationError("Name is required")
        if not email.strip():
            raise ValidationError("Email is required")
        payload = {"name": name, "email": email, "role": UserRole(role).value, "phone": phone or ""}
        if password:
            payload["password"] = password
        body = await self.api.put(f"/users/{user_id}", payload)
        return StaffUser(**unwrap(body, "user", default={"_id": user_id, **payload}))

    async def delete(self, user: StaffUser, confirmation: str) -> str:
        """
        Delete a staff user once the operator has typed their email.

        Raises:
            ConfirmationMismatchError: unless confirmation equals user.email
        """
        require_confirmation(confirmation, user.email, what="user email")
        body = await self.api.delete(f"/users/{user.id}")
        logger.info(f"User {user.email} deleted")
        return body.get("message", "") if isinstance(body, dict) else ""


class DashboardService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def stats(self) -> DashboardStats:
        body = await self.api.get("/dashboard/stats")
        return DashboardStats(**unwrap(body, default={}))

    async def appointments(self, date: Optional[str] = None) -> DashboardAppointments:
        body = await self.api.get("/dashboard/appointments", params={"date": date})
        return DashboardAppointments(**unwrap(body, default={}))

    async def activity(self, limit: Optional[int] = None) -> Any:
        body = await self.api.get("/dashboard/activity", params={"limit": limit})
        return unwrap(body, default=[])
