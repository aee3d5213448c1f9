"""
Doctor Service
"""

import logging
from typing import Optional, Dict, Any, List, Union

from clinic_console.infrastructure.http_client import ApiClient, unwrap
from clinic_console.models.patients import Doctor

logger = logging.getLogger(__name__)


class DoctorService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def list(self, search: Optional[str] = None, is_active: Optional[bool] = None) -> List[Doctor]:
        body = await self.api.get("/doctors", params={"search": search, "isActive": is_active})
        return [Doctor(**item) for item in unwrap(body, "doctors", default=[])]

    async def get(self, doctor_id: str) -> Doctor:
        body = await self.api.get(f"/doctors/{doctor_id}")
        return Doctor(**unwrap(body, "doctor"))

    async def create(self, data: Union[Doctor, Dict[str, Any]]) -> Doctor:
        payload = data.to_payload() if isinstance(data, Doctor) else dict(data)
        body = await self.api.post("/doctors", payload)
        doctor = Doctor(**unwrap(body, "doctor"))
        logger.info(f"✅ Doctor added: {doctor.name}")
        return doctor

    async def update(self, doctor_id: str, data: Union[Doctor, Dict[str, Any]]) -> Doctor:
        payload = data.to_payload() if isinstance(data, Doctor) else dict(data)
        body = await self.api.put(f"/doctors/{doctor_id}", payload)
        return Doctor(**unwrap(body, "doctor"))
