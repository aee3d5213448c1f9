"""
Pharmacy inventory and rate-card models.
"""

from typing import Optional, List
from pydantic import Field

from .common import BackendModel, Pagination
from .enums import ServiceCategory


class Medicine(BackendModel):
    id: Optional[str] = Field(None, alias="_id")
    medicine_id: Optional[str] = Field(None, alias="medicineId")
    name: str
    generic_name: Optional[str] = Field(None, alias="genericName")
    category: str = "tablet"
    manufacturer: Optional[str] = None
    unit: str = "strip"
    reorder_level: int = Field(10, alias="reorderLevel")
    current_stock: Optional[int] = Field(None, alias="currentStock")
    is_active: bool = Field(True, alias="isActive")
    created_at: Optional[str] = Field(None, alias="createdAt")

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock is not None and self.current_stock <= self.reorder_level


class MedicinePage(BackendModel):
    medicines: List[Medicine] = Field(default_factory=list)
    pagination: Optional[Pagination] = None


class StockBatch(BackendModel):
    """A purchased batch of a medicine."""
    id: Optional[str] = Field(None, alias="_id")
    medicine_id: str = Field(..., alias="medicineId")
    batch_no: str = Field(..., alias="batchNo")
    quantity: int
    current_qty: Optional[int] = Field(None, alias="currentQty")
    purchase_price: Optional[float] = Field(None, alias="purchasePrice")
    selling_price: Optional[float] = Field(None, alias="sellingPrice")
    expiry_date: str = Field(..., alias="expiryDate")  # YYYY-MM-DD
    status: Optional[str] = None


class ServiceItem(BackendModel):
    """Lab test, radiology study or procedure on the clinic rate card."""
    id: Optional[str] = Field(None, alias="_id")
    name: str
    category: ServiceCategory = ServiceCategory.OTHER
    rate: float = 0
    description: Optional[str] = None
    is_active: bool = Field(True, alias="isActive")
    created_at: Optional[str] = Field(None, alias="createdAt")
