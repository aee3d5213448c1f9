"""
Super-admin console models.
"""

from typing import Optional, List, Dict, Any
from pydantic import Field

from .common import BackendModel, Pagination, Address
from .auth import Subscription


class TenantSummary(BackendModel):
    id: Optional[str] = Field(None, alias="_id")
    tenant_id: str = Field(..., alias="tenantId")
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = Field(True, alias="isActive")
    subscription: Optional[Subscription] = None
    created_at: Optional[str] = Field(None, alias="createdAt")


class TenantPage(BackendModel):
    tenants: List[TenantSummary] = Field(default_factory=list)
    pagination: Optional[Pagination] = None


class AdminDashboard(BackendModel):
    """Platform-wide counters; the backend owns the exact set of fields."""

    class Config:
        extra = "allow"

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class Impersonation(BackendModel):
    """
    Marker stored while a super admin acts as a tenant.

    Keeps the super-admin token so the console can switch back.
    """
    active: bool = True
    super_admin_token: str = Field(..., alias="superAdminToken")
    tenant_id: str = Field(..., alias="tenantId")
    tenant_name: str = Field(..., alias="tenantName")
    super_admin_name: Optional[str] = Field(None, alias="superAdminName")


class TenantStats(BackendModel):
    users: int = 0
    patients: int = 0
    doctors: int = 0
    appointments: int = 0


class TenantUser(BackendModel):
    id: Optional[str] = Field(None, alias="_id")
    name: str
    email: str
    role: str
    is_active: bool = Field(True, alias="isActive")


class TenantDetails(TenantSummary):
    """A tenant with its usage counters and staff list."""
    address: Optional[Address] = None
    stats: TenantStats = Field(default_factory=TenantStats)
    users: List[TenantUser] = Field(default_factory=list)
