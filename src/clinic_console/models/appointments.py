"""
Appointment models and the status flow the console enforces.

The flow is linear: scheduled -> checked-in -> in-progress -> completed, with
cancelled reachable from any state that is not yet terminal. Completing an
appointment requires a bill; that check runs here before the backend is
called and is not authoritative.
"""

from typing import Optional, List, NamedTuple
from pydantic import Field

from .common import BackendModel, Pagination
from .enums import AppointmentStatus, AppointmentType
from clinic_console.core.exceptions import TransitionBlockedError

BILL_REQUIRED_MESSAGE = "Please generate bill before marking appointment as completed"

TERMINAL_STATUSES = frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED})


class StatusAction(NamedTuple):
    """An action the console can offer for an appointment."""
    target: AppointmentStatus
    label: str


_NEXT_ACTIONS = {
    AppointmentStatus.SCHEDULED: StatusAction(AppointmentStatus.CHECKED_IN, "Check-in Patient"),
    AppointmentStatus.CHECKED_IN: StatusAction(AppointmentStatus.IN_PROGRESS, "Start Consultation"),
    AppointmentStatus.IN_PROGRESS: StatusAction(AppointmentStatus.COMPLETED, "Complete"),
}

CANCEL_ACTION = StatusAction(AppointmentStatus.CANCELLED, "Cancel Appointment")


class AppointmentBilling(BackendModel):
    has_bill: bool = Field(False, alias="hasBill")
    bill_id: Optional[str] = Field(None, alias="billId")
    payment_status: Optional[str] = Field(None, alias="paymentStatus")


class AppointmentPatient(BackendModel):
    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    phone: Optional[str] = None
    patient_id: Optional[str] = Field(None, alias="patientId")


class AppointmentDoctor(BackendModel):
    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None


class Appointment(BackendModel):
    """Appointment model."""
    id: str = Field(..., alias="_id")
    appointment_id: Optional[str] = Field(None, alias="appointmentId")
    token_no: Optional[int] = Field(None, alias="tokenNo")
    patient_id: Optional[str] = Field(None, alias="patientId")
    doctor_id: Optional[str] = Field(None, alias="doctorId")
    date: str  # ISO format YYYY-MM-DD
    type: AppointmentType = AppointmentType.NEW
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None
    billing: AppointmentBilling = Field(default_factory=AppointmentBilling)
    patient: Optional[AppointmentPatient] = None
    doctor: Optional[AppointmentDoctor] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    class Config:
        json_schema_extra = {
            "example": {
                "_id": "65f0c1",
                "appointmentId": "APT-0001",
                "tokenNo": 4,
                "patientId": "65a1",
                "doctorId": "65d1",
                "date": "2025-11-20",
                "type": "new",
                "status": "scheduled",
                "billing": {"hasBill": False}
            }
        }

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class AppointmentPage(BackendModel):
    appointments: List[Appointment] = Field(default_factory=list)
    pagination: Optional[Pagination] = None


def next_action(status: AppointmentStatus) -> Optional[StatusAction]:
    """The single forward action for a status, None once terminal."""
    return _NEXT_ACTIONS.get(AppointmentStatus(status))


def available_actions(appointment: Appointment) -> List[StatusAction]:
    """Actions to offer: the forward step (if any) and cancel while not terminal."""
    if appointment.is_terminal:
        return []
    actions = []
    forward = next_action(appointment.status)
    if forward:
        actions.append(forward)
    actions.append(CANCEL_ACTION)
    return actions


def check_transition(appointment: Appointment, new_status: AppointmentStatus):
    """
    Refuse a status change the console would never offer.

    Raises:
        TransitionBlockedError: for terminal appointments, skipped steps, or
            completing an appointment that has no bill yet
    """
    new_status = AppointmentStatus(new_status)
    if appointment.is_terminal:
        raise TransitionBlockedError(
            f"Appointment is already {appointment.status.value} and cannot change"
        )
    if new_status == AppointmentStatus.CANCELLED:
        return
    forward = next_action(appointment.status)
    if forward is None or forward.target != new_status:
        raise TransitionBlockedError(
            f"Cannot move appointment from {appointment.status.value} to {new_status.value}"
        )
    if new_status == AppointmentStatus.COMPLETED and not appointment.billing.has_bill:
        raise TransitionBlockedError(BILL_REQUIRED_MESSAGE)
