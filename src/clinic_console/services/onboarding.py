"""
Onboarding Service

First-login setup for a new tenant: clinic details, then branding, then the
first doctor. The owner may skip the whole flow.
"""

import base64
import logging
import mimetypes
from pathlib import Path
from typing import Optional, Dict, Any

from clinic_console.core.exceptions import ValidationError
from clinic_console.infrastructure.http_client import ApiClient, unwrap
from clinic_console.models.clinic import OnboardingStatus
from clinic_console.models.common import Address
from clinic_console.models.enums import OnboardingStep
from clinic_console.models.patients import Doctor

logger = logging.getLogger(__name__)

# Branding images are sent inline; the backend rejects anything larger
MAX_IMAGE_BYTES = 2 * 1024 * 1024


def file_to_base64(path: str) -> str:
    """Read an image and return it as a data URL (data:<mime>;base64,...)."""
    file_path = Path(path)
    mime_type = mimetypes.guess_type(file_path.name)[0]
    if not mime_type or not mime_type.startswith("image/"):
        raise ValidationError(f"{file_path.name} is not an image")
    raw = file_path.read_bytes()
    if len(raw) > MAX_IMAGE_BYTES:
        raise ValidationError(f"{file_path.name} is larger than 2 MB")
    return f"data:{mime_type};base64,{base64.b64encode(raw).decode('ascii')}"


class OnboardingService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def status(self) -> OnboardingStatus:
        body = await self.api.get("/onboarding/status")
        return OnboardingStatus(**unwrap(body, default={}))

    async def save_clinic_details(
        self,
        clinic_name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[Address] = None
    ) -> str:
        """Step 1."""
        if not clinic_name.strip():
            raise ValidationError("Clinic name is required")
        payload: Dict[str, Any] = {"clinicName": clinic_name}
        if phone:
            payload["phone"] = phone
        if email:
            payload["email"] = email
        if address:
            payload["address"] = address.to_payload()
        body = await self.api.put("/onboarding/clinic-details", payload)
        logger.info("Onboarding: clinic details saved")
        return body.get("message", "") if isinstance(body, dict) else ""

    async def save_branding(
        self,
        logo: Optional[str] = None,
        bill_header_image: Optional[str] = None
    ) -> str:
        """Step 2. Images are base64 data URLs, see file_to_base64."""
        body = await self.api.put("/onboarding/branding", {
            "logo": logo,
            "billHeaderImage": bill_header_image,
        })
        logger.info("Onboarding: branding saved")
        return body.get("message", "") if isinstance(body, dict) else ""

    async def add_doctor(self, doctor: Doctor) -> Doctor:
        """Step 3."""
        body = await self.api.post("/onboarding/doctor", doctor.to_payload())
        logger.info(f"Onboarding: doctor {doctor.name} added")
        created = unwrap(body, "doctor")
        return Doctor(**created) if created else doctor

    async def complete(self) -> str:
        body = await self.api.post("/onboarding/complete", {})
        logger.info("✅ Onboarding completed")
        return body.get("message", "") if isinstance(body, dict) else ""

    async def skip(self) -> str:
        """Owner only; the backend enforces the role."""
        body = await self.api.post("/onboarding/skip", {})
        logger.info("Onboarding skipped")
        return body.get("message", "") if isinstance(body, dict) else ""


def next_step(status: OnboardingStatus) -> Optional[OnboardingStep]:
    """Where a resumed onboarding should pick up, or None when done."""
    return status.next_step()
