"""
Billing models.

OPD, Misc (lab/radiology) and Medicine bills share one item/discount/payment
shape. BillDraft recomputes the totals for display; the figures stored on a
Bill come from the backend and are the ones that count.
"""

from typing import Optional, List, Dict, Any
from pydantic import Field

from .common import BackendModel, Pagination
from .enums import BillType, DiscountType, PaymentMode, NEW_BILL_PAYMENT_MODES
from clinic_console.core.exceptions import BillValidationError


class BillItem(BackendModel):
    description: str = ""
    quantity: float = 1
    rate: float = 0

    @property
    def amount(self) -> float:
        return self.quantity * self.rate

    @property
    def is_blank(self) -> bool:
        return not self.description.strip()


class Bill(BackendModel):
    """A bill as stored by the backend."""
    id: str = Field(..., alias="_id")
    bill_no: Optional[str] = Field(None, alias="billNo")
    patient_id: Optional[str] = Field(None, alias="patientId")
    patient_name: Optional[str] = Field(None, alias="patientName")
    patient_phone: Optional[str] = Field(None, alias="patientPhone")
    doctor_id: Optional[str] = Field(None, alias="doctorId")
    doctor_name: Optional[str] = Field(None, alias="doctorName")
    appointment_id: Optional[str] = Field(None, alias="appointmentId")
    items: List[BillItem] = Field(default_factory=list)
    subtotal: float = 0
    discount_type: Optional[DiscountType] = Field(None, alias="discountType")
    discount_value: Optional[float] = Field(None, alias="discountValue")
    discount_amount: float = Field(0, alias="discountAmount")
    total: float = 0
    payment_mode: Optional[PaymentMode] = Field(None, alias="paymentMode")
    payment_status: Optional[str] = Field(None, alias="paymentStatus")
    remarks: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")

    class Config:
        json_schema_extra = {
            "example": {
                "_id": "66b0",
                "billNo": "OPD-2025-0001",
                "patientName": "Asha Rao",
                "items": [{"description": "Consultation", "quantity": 1, "rate": 500}],
                "subtotal": 500,
                "discountType": "fixed",
                "discountValue": 50,
                "discountAmount": 50,
                "total": 450,
                "paymentMode": "upi"
            }
        }


class BillPage(BackendModel):
    bills: List[Bill] = Field(default_factory=list)
    pagination: Optional[Pagination] = None


def calculate_subtotal(items: List[BillItem]) -> float:
    return sum(item.amount for item in items)


def calculate_discount(subtotal: float, discount_type: DiscountType, discount_value: float) -> float:
    if DiscountType(discount_type) == DiscountType.PERCENTAGE:
        return subtotal * discount_value / 100
    return discount_value


class BillDraft(BackendModel):
    """A bill being filled in on the console, before it is sent."""
    bill_type: BillType
    items: List[BillItem] = Field(default_factory=lambda: [BillItem()])
    discount_type: DiscountType = DiscountType.FIXED
    discount_value: float = 0
    payment_mode: PaymentMode = PaymentMode.CASH
    remarks: Optional[str] = None

    # Type-specific
    patient_id: Optional[str] = None
    doctor_id: Optional[str] = None
    appointment_id: Optional[str] = None
    walk_in_name: Optional[str] = None
    walk_in_phone: Optional[str] = None

    @property
    def subtotal(self) -> float:
        return calculate_subtotal(self.items)

    @property
    def discount(self) -> float:
        return calculate_discount(self.subtotal, self.discount_type, self.discount_value)

    @property
    def total(self) -> float:
        return self.subtotal - self.discount

    @property
    def is_walk_in(self) -> bool:
        return self.bill_type == BillType.MEDICINE and not self.patient_id

    def add_item(self, description: str = "", quantity: float = 1, rate: float = 0) -> BillItem:
        item = BillItem(description=description, quantity=quantity, rate=rate)
        self.items.append(item)
        return item

    def remove_item(self, index: int):
        # A draft always keeps at least one row to type into
        if len(self.items) > 1:
            del self.items[index]

    def submittable_items(self) -> List[BillItem]:
        return [item for item in self.items if not item.is_blank]

    def validate_for_submit(self):
        """
        Raises:
            BillValidationError: with the message the console shows the user
        """
        if self.bill_type == BillType.MEDICINE:
            if self.is_walk_in and not (self.walk_in_name or "").strip():
                raise BillValidationError("Please select a patient or enter walk-in customer name")
        else:
            if not self.patient_id:
                raise BillValidationError("Please select a patient")
            if self.bill_type == BillType.OPD and not self.doctor_id:
                raise BillValidationError("Please select a doctor")
        if not self.submittable_items():
            raise BillValidationError("Please add at least one item")
        if PaymentMode(self.payment_mode) not in NEW_BILL_PAYMENT_MODES:
            raise BillValidationError(f"Unsupported payment mode: {self.payment_mode}")
        if self.discount_value < 0:
            raise BillValidationError("Discount cannot be negative")

    def to_request(self) -> Dict[str, Any]:
        """Validate and build the create-bill request body."""
        self.validate_for_submit()
        payload: Dict[str, Any] = {
            "items": [item.to_payload() for item in self.submittable_items()],
            "discountType": DiscountType(self.discount_type).value,
            "discountValue": self.discount_value,
            "paymentMode": PaymentMode(self.payment_mode).value,
            "remarks": self.remarks or "",
        }
        if self.bill_type == BillType.OPD:
            payload["patientId"] = self.patient_id
            payload["doctorId"] = self.doctor_id
            if self.appointment_id:
                payload["appointmentId"] = self.appointment_id
        elif self.bill_type == BillType.MISC:
            payload["patientId"] = self.patient_id
        elif self.is_walk_in:
            payload["patientName"] = self.walk_in_name.strip()
            if self.walk_in_phone:
                payload["patientPhone"] = self.walk_in_phone.strip()
        else:
            payload["patientId"] = self.patient_id
        return payload
