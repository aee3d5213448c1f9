"""
Super Admin Service

Platform-level tenant management. Every request carries the super-admin
bearer token (superAdminToken), which is separate from any tenant session.
"""

import logging
from typing import Optional, Dict, Any

from clinic_console.core.confirmation import require_confirmation
from clinic_console.core.credential_store import (
    AUTH_TOKEN_KEY,
    AUTH_USER_KEY,
    TENANT_KEY,
    SUPER_ADMIN_TOKEN_KEY,
    SUPER_ADMIN_USER_KEY,
    IMPERSONATION_KEY,
)
from clinic_console.core.exceptions import NotAuthenticatedError
from clinic_console.infrastructure.http_client import ApiClient, session_data, unwrap
from clinic_console.models.admin import (
    AdminDashboard,
    Impersonation,
    TenantDetails,
    TenantPage,
    TenantSummary,
)

logger = logging.getLogger(__name__)

ADMIN_DASHBOARD_PATH = "/admin/dashboard"
TENANT_DASHBOARD_PATH = "/dashboard"


class SuperAdminService:
    def __init__(self, api: ApiClient):
        self.api = api.scoped(SUPER_ADMIN_TOKEN_KEY)
        self.store = api.store
        self.navigator = api.navigator

    def _require_login(self):
        if not self.store.has(SUPER_ADMIN_TOKEN_KEY):
            raise NotAuthenticatedError("Super admin login required")

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        body = await self.api.post("/super-admin/login", {"email": email, "password": password})
        data = session_data(body)
        self.store.set(SUPER_ADMIN_TOKEN_KEY, data["token"])
        self.store.set_json(SUPER_ADMIN_USER_KEY, data.get("user") or {})
        logger.info(f"✅ Super admin logged in: {email}")
        return data

    def logout(self):
        self.store.remove(SUPER_ADMIN_TOKEN_KEY, SUPER_ADMIN_USER_KEY)

    def get_user(self) -> Optional[Dict[str, Any]]:
        return self.store.get_json(SUPER_ADMIN_USER_KEY)

    async def dashboard(self) -> AdminDashboard:
        self._require_login()
        body = await self.api.get("/super-admin/dashboard")
        return AdminDashboard(**unwrap(body, default={}))

    async def list_tenants(
        self,
        page: int = 1,
        limit: int = 20,
        status: Optional[str] = None,
        search: Optional[str] = None
    ) -> TenantPage:
        self._require_login()
        body = await self.api.get("/super-admin/tenants", params={
            "page": page,
            "limit": limit,
            "status": status,
            "search": search,
        })
        return TenantPage(**unwrap(body, default={}))

    async def get_tenant(self, tenant_id: str) -> TenantDetails:
        self._require_login()
        body = await self.api.get(f"/super-admin/tenants/{tenant_id}")
        return TenantDetails(**unwrap(body, "tenant"))

    async def update_tenant(self, tenant_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        self._require_login()
        body = await self.api.patch(f"/super-admin/tenants/{tenant_id}", data)
        return unwrap(body, default={})

    async def set_status(self, tenant_id: str, is_active: bool) -> Dict[str, Any]:
        self._require_login()
        body = await self.api.patch(f"/super-admin/tenants/{tenant_id}/status", {"isActive": is_active})
        logger.info(f"Tenant {tenant_id} {'activated' if is_active else 'deactivated'}")
        return unwrap(body, default={})

    async def update_subscription(self, tenant_id: str, plan: str, status: str) -> Dict[str, Any]:
        self._require_login()
        body = await self.api.patch(
            f"/super-admin/tenants/{tenant_id}/subscription",
            {"plan": plan, "status": status}
        )
        logger.info(f"Tenant {tenant_id} subscription set to {plan}/{status}")
        return unwrap(body, default={})

    async def delete_tenant(self, tenant: TenantSummary, confirmation: str) -> str:
        """
        Permanently delete a tenant and all of its data.

        The operator must type the tenant's tenantId exactly; it is sent to the
        backend as confirmationCode.

        Raises:
            ConfirmationMismatchError: before any request when the text differs
        """
        self._require_login()
        require_confirmation(confirmation, tenant.tenant_id, what="tenant ID")
        body = await self.api.delete(
            f"/super-admin/tenants/{tenant.tenant_id}",
            json={"confirmationCode": confirmation}
        )
        logger.info(f"✅ Tenant \"{tenant.name}\" deleted")
        return body.get("message", "") if isinstance(body, dict) else ""

    async def impersonate(self, tenant_id: str) -> Impersonation:
        """
        Act as a tenant. The tenant-scoped token becomes the console's session
        token and a marker remembers the super-admin token for the way back.
        """
        self._require_login()
        super_admin_token = self.store.get(SUPER_ADMIN_TOKEN_KEY)
        body = await self.api.post(f"/super-admin/tenants/{tenant_id}/impersonate")
        data = session_data(body)
        tenant = data.get("tenant") or {}

        marker = Impersonation(
            superAdminToken=super_admin_token,
            tenantId=tenant.get("tenantId", tenant_id),
            tenantName=tenant.get("name", tenant_id),
            superAdminName=(data.get("impersonation") or {}).get("superAdminName"),
        )
        self.store.set(AUTH_TOKEN_KEY, data["token"])
        self.store.set_json(AUTH_USER_KEY, data.get("user") or {})
        if tenant:
            self.store.set_json(TENANT_KEY, tenant)
        else:
            self.store.remove(TENANT_KEY)
        self.store.set_json(IMPERSONATION_KEY, marker.model_dump(by_alias=True))

        logger.info(f"✅ Impersonating tenant {marker.tenant_id} ({marker.tenant_name})")
        self.navigator.go(TENANT_DASHBOARD_PATH)
        return marker

    def current_impersonation(self) -> Optional[Impersonation]:
        data = self.store.get_json(IMPERSONATION_KEY)
        if not data or not data.get("active"):
            return None
        try:
            return Impersonation(**data)
        except ValueError:
            logger.warning("Ignoring malformed impersonation marker")
            return None

    def exit_impersonation(self) -> bool:
        """Drop the tenant session and restore the super-admin token."""
        marker = self.current_impersonation()
        if marker is None:
            return False
        self.store.clear_session()
        self.store.remove(IMPERSONATION_KEY)
        if marker.super_admin_token:
            self.store.set(SUPER_ADMIN_TOKEN_KEY, marker.super_admin_token)
        logger.info(f"Exited tenant view for {marker.tenant_id}")
        self.navigator.go(ADMIN_DASHBOARD_PATH)
        return True
