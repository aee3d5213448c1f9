"""
Patient Service
"""

import logging
from typing import Optional, Dict, Any, Literal, Union

from clinic_console.infrastructure.http_client import ApiClient, unwrap
from clinic_console.models.patients import Patient, PatientPage

logger = logging.getLogger(__name__)

PatientData = Union[Patient, Dict[str, Any]]


def _as_payload(data: PatientData) -> Dict[str, Any]:
    return data.to_payload() if isinstance(data, Patient) else dict(data)


class PatientService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def list(
        self,
        search: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[Literal["asc", "desc"]] = None,
        is_active: Optional[bool] = None
    ) -> PatientPage:
        body = await self.api.get("/patients", params={
            "search": search,
            "page": page or None,
            "limit": limit or None,
            "sortBy": sort_by,
            "sortOrder": sort_order,
            "isActive": is_active,
        })
        return PatientPage(**unwrap(body, default={}))

    async def get(self, patient_id: str) -> Patient:
        body = await self.api.get(f"/patients/{patient_id}")
        return Patient(**unwrap(body, "patient"))

    async def create(self, data: PatientData) -> Patient:
        body = await self.api.post("/patients", _as_payload(data))
        patient = Patient(**unwrap(body, "patient"))
        logger.info(f"✅ Patient created: {patient.patient_id or patient.id}")
        return patient

    async def update(self, patient_id: str, data: PatientData) -> Patient:
        body = await self.api.put(f"/patients/{patient_id}", _as_payload(data))
        return Patient(**unwrap(body, "patient"))

    async def delete(self, patient_id: str) -> str:
        """Soft delete: the backend marks the patient inactive."""
        body = await self.api.delete(f"/patients/{patient_id}")
        logger.info(f"Patient {patient_id} deactivated")
        return body.get("message", "") if isinstance(body, dict) else ""
