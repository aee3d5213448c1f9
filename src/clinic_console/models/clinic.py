"""
Clinic profile, staff and onboarding models.
"""

from typing import Optional, List, Dict
from pydantic import Field

from .common import BackendModel, Address
from .enums import UserRole, OnboardingStep
from .auth import OnboardingState, Subscription


class WorkingDay(BackendModel):
    open: str = "09:00"
    close: str = "18:00"
    is_open: bool = Field(True, alias="isOpen")


class ClinicSettings(BackendModel):
    """Clinic profile, address, billing config and working hours."""
    id: Optional[str] = Field(None, alias="_id")
    tenant_id: Optional[str] = Field(None, alias="tenantId")
    clinic_name: Optional[str] = Field(None, alias="clinicName")
    tagline: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[Address] = None
    logo: Optional[str] = None
    working_hours: Dict[str, WorkingDay] = Field(default_factory=dict, alias="workingHours")
    appointment_duration: Optional[int] = Field(None, alias="appointmentDuration")  # minutes
    currency: Optional[str] = None
    tax_rate: Optional[float] = Field(None, alias="taxRate")
    invoice_prefix: Optional[str] = Field(None, alias="invoicePrefix")
    prescription_header: Optional[str] = Field(None, alias="prescriptionHeader")
    prescription_footer: Optional[str] = Field(None, alias="prescriptionFooter")


class SettingsBundle(BackendModel):
    settings: ClinicSettings
    subscription: Optional[Subscription] = None


class StaffUser(BackendModel):
    """A staff login within the tenant."""
    id: Optional[str] = Field(None, alias="_id")
    name: str
    email: str
    role: UserRole = UserRole.RECEPTIONIST
    phone: Optional[str] = None
    is_active: bool = Field(True, alias="isActive")
    created_at: Optional[str] = Field(None, alias="createdAt")


class Branding(BackendModel):
    logo: Optional[str] = None
    bill_header_image: Optional[str] = Field(None, alias="billHeaderImage")


class OnboardingTenant(BackendModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Address = Field(default_factory=Address)
    branding: Branding = Field(default_factory=Branding)


class OnboardingStatus(BackendModel):
    onboarding: OnboardingState = Field(default_factory=OnboardingState)
    tenant: OnboardingTenant = Field(default_factory=OnboardingTenant)
    doctor_count: int = Field(0, alias="doctorCount")

    def pending_steps(self) -> List[OnboardingStep]:
        steps = self.onboarding.steps
        done = {
            OnboardingStep.CLINIC_DETAILS: steps.clinic_details,
            OnboardingStep.BRANDING: steps.branding,
            OnboardingStep.DOCTOR: steps.doctor,
        }
        return [step for step in OnboardingStep if not done[step]]

    def next_step(self) -> Optional[OnboardingStep]:
        """First incomplete step in clinic-details -> branding -> doctor order."""
        if self.onboarding.completed:
            return None
        pending = self.pending_steps()
        return pending[0] if pending else None
