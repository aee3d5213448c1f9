"""
Account and tenant models returned by the auth endpoints.
"""

from typing import Optional
from pydantic import Field

from .common import BackendModel


class User(BackendModel):
    id: str
    email: str
    name: str
    role: str

    class Config:
        json_schema_extra = {
            "example": {
                "id": "u_01",
                "email": "owner@clinic.example",
                "name": "Dr. Meera Iyer",
                "role": "owner"
            }
        }


class Subscription(BackendModel):
    plan: Optional[str] = None
    status: Optional[str] = None
    trial_ends_at: Optional[str] = Field(None, alias="trialEndsAt")


class OnboardingSteps(BackendModel):
    clinic_details: bool = Field(False, alias="clinicDetails")
    branding: bool = False
    doctor: bool = False


class OnboardingState(BackendModel):
    completed: bool = False
    completed_at: Optional[str] = Field(None, alias="completedAt")
    steps: OnboardingSteps = Field(default_factory=OnboardingSteps)


class Tenant(BackendModel):
    id: Optional[str] = None
    tenant_id: str = Field(..., alias="tenantId")
    name: str
    subscription: Optional[Subscription] = None
    onboarding: Optional[OnboardingState] = None

    @property
    def needs_onboarding(self) -> bool:
        return self.onboarding is not None and not self.onboarding.completed


class LoginResult(BackendModel):
    user: User
    tenant: Tenant
    token: str


class ActivationTarget(BackendModel):
    """Who an activation link belongs to."""
    email: str
    clinic_name: Optional[str] = Field(None, alias="clinicName")
