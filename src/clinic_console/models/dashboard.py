"""
Dashboard summary models.
"""

from typing import Any, Dict, List
from pydantic import Field

from .common import BackendModel


class DashboardStats(BackendModel):
    total_patients: int = Field(0, alias="totalPatients")
    today_appointments: int = Field(0, alias="todayAppointments")
    today_revenue: float = Field(0, alias="todayRevenue")
    low_stock_items: int = Field(0, alias="lowStockItems")


class DashboardAppointments(BackendModel):
    appointments: List[Dict[str, Any]] = Field(default_factory=list)
    total: int = 0
