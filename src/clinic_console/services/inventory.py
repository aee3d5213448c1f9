"""
Medicine (pharmacy inventory) and rate-card services.
"""

import logging
from typing import Optional, Dict, Any, List, Union

from clinic_console.core.config import settings
from clinic_console.core.exceptions import ValidationError
from clinic_console.infrastructure.http_client import ApiClient, unwrap
from clinic_console.models.inventory import Medicine, MedicinePage, StockBatch, ServiceItem

logger = logging.getLogger(__name__)


def _payload(data: Union[Medicine, ServiceItem, Dict[str, Any]]) -> Dict[str, Any]:
    return data.to_payload() if hasattr(data, "to_payload") else dict(data)


class MedicineService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def list(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        include_stock: Optional[bool] = None
    ) -> MedicinePage:
        body = await self.api.get("/medicines", params={
            "search": search,
            "category": category,
            "page": page,
            "limit": limit,
            "includeStock": include_stock,
        })
        return MedicinePage(**unwrap(body, default={}))

    async def get(self, medicine_id: str) -> Dict[str, Any]:
        """Medicine plus its stock batches: {"medicine": Medicine, "batches": [StockBatch]}."""
        body = await self.api.get(f"/medicines/{medicine_id}")
        data = unwrap(body, default={})
        return {
            "medicine": Medicine(**data["medicine"]) if data.get("medicine") else None,
            "batches": [StockBatch(**b) for b in data.get("batches") or []],
        }

    async def create(self, data: Union[Medicine, Dict[str, Any]]) -> Medicine:
        body = await self.api.post("/medicines", _payload(data))
        medicine = Medicine(**unwrap(body, "medicine"))
        logger.info(f"✅ Medicine added: {medicine.name}")
        return medicine

    async def update(self, medicine_id: str, data: Union[Medicine, Dict[str, Any]]) -> Medicine:
        body = await self.api.put(f"/medicines/{medicine_id}", _payload(data))
        return Medicine(**unwrap(body, "medicine"))

    async def low_stock(self) -> List[Medicine]:
        body = await self.api.get("/medicines/low-stock")
        return [Medicine(**item) for item in unwrap(body, "medicines", default=[])]

    async def expiring(self, days: Optional[int] = None) -> List[Medicine]:
        """Medicines with a batch expiring within `days` (default 90)."""
        days = days if days is not None else settings.expiring_days_default
        body = await self.api.get("/medicines/expiring", params={"days": days})
        return [Medicine(**item) for item in unwrap(body, "medicines", default=[])]

    async def add_stock(
        self,
        medicine_id: str,
        batch_no: str,
        quantity: int,
        expiry_date: str,
        purchase_price: Optional[float] = None,
        selling_price: Optional[float] = None
    ) -> StockBatch:
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")
        payload = {
            "medicineId": medicine_id,
            "batchNo": batch_no,
            "quantity": quantity,
            "expiryDate": expiry_date,
        }
        if purchase_price is not None:
            payload["purchasePrice"] = purchase_price
        if selling_price is not None:
            payload["sellingPrice"] = selling_price
        body = await self.api.post("/medicines/stock", payload)
        logger.info(f"✅ Stock added: {quantity} x {medicine_id} batch {batch_no}")
        batch = unwrap(body, "batch")
        return StockBatch(**batch) if batch else StockBatch(**payload)


class ServiceItemService:
    """Lab tests, procedures and other service charges."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def list(self, search: Optional[str] = None, category: Optional[str] = None) -> List[ServiceItem]:
        body = await self.api.get("/services", params={"search": search, "category": category})
        return [ServiceItem(**item) for item in unwrap(body, "services", default=[])]

    async def get(self, service_id: str) -> ServiceItem:
        body = await self.api.get(f"/services/{service_id}")
        return ServiceItem(**unwrap(body, "service"))

    async def create(self, data: Union[ServiceItem, Dict[str, Any]]) -> ServiceItem:
        body = await self.api.post("/services", _payload(data))
        return ServiceItem(**unwrap(body, "service"))

    async def update(self, service_id: str, data: Union[ServiceItem, Dict[str, Any]]) -> ServiceItem:
        body = await self.api.put(f"/services/{service_id}", _payload(data))
        return ServiceItem(**unwrap(body, "service"))

    async def delete(self, service_id: str) -> str:
        body = await self.api.delete(f"/services/{service_id}")
        return body.get("message", "") if isinstance(body, dict) else ""
