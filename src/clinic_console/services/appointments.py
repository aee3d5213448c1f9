"""
Appointment Service
"""

import logging
from typing import Optional, Dict, Any

from clinic_console.infrastructure.http_client import ApiClient, unwrap
from clinic_console.models.appointments import Appointment, AppointmentPage, check_transition
from clinic_console.models.enums import AppointmentStatus, AppointmentType

logger = logging.getLogger(__name__)


class AppointmentService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def list(
        self,
        date: Optional[str] = None,
        status: Optional[str] = None,
        doctor_id: Optional[str] = None,
        patient_id: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> AppointmentPage:
        body = await self.api.get("/appointments", params={
            "date": date,
            "status": AppointmentStatus(status).value if status else None,
            "doctorId": doctor_id,
            "patientId": patient_id,
            "page": page or None,
            "limit": limit or None,
        })
        return AppointmentPage(**unwrap(body, default={}))

    async def get(self, appointment_id: str) -> Appointment:
        body = await self.api.get(f"/appointments/{appointment_id}")
        return Appointment(**unwrap(body, "appointment"))

    async def create(
        self,
        patient_id: str,
        doctor_id: str,
        date: str,
        type: AppointmentType = AppointmentType.NEW,
        notes: Optional[str] = None
    ) -> Appointment:
        payload = {
            "patientId": patient_id,
            "doctorId": doctor_id,
            "date": date,
            "type": AppointmentType(type).value,
        }
        if notes:
            payload["notes"] = notes
        body = await self.api.post("/appointments", payload)
        appointment = Appointment(**unwrap(body, "appointment"))
        logger.info(f"✅ Appointment booked: {appointment.appointment_id} token #{appointment.token_no}")
        return appointment

    async def update(self, appointment_id: str, data: Dict[str, Any]) -> Appointment:
        body = await self.api.put(f"/appointments/{appointment_id}", data)
        return Appointment(**unwrap(body, "appointment"))

    async def change_status(self, appointment: Appointment, new_status: AppointmentStatus) -> Appointment:
        """
        Move an appointment along its status flow.

        Raises:
            TransitionBlockedError: if the console would not offer this move
        """
        check_transition(appointment, new_status)
        new_status = AppointmentStatus(new_status)
        body = await self.api.put(f"/appointments/{appointment.id}", {"status": new_status.value})
        updated = unwrap(body, "appointment")
        if updated:
            return Appointment(**updated)
        # Older backends only acknowledge; reflect the change locally
        return appointment.model_copy(update={"status": new_status})
