"""
Patient and doctor models.
"""

from typing import Optional, List
from pydantic import Field

from .common import BackendModel, Address, Pagination
from .enums import Gender


class EmergencyContact(BackendModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    relation: Optional[str] = None


class Patient(BackendModel):
    """Patient record."""
    id: Optional[str] = Field(None, alias="_id")
    patient_id: Optional[str] = Field(None, alias="patientId")
    name: str
    age: Optional[int] = None
    gender: Optional[Gender] = None
    phone: str
    email: Optional[str] = None
    address: Optional[Address] = None
    blood_group: Optional[str] = Field(None, alias="bloodGroup")
    allergies: List[str] = Field(default_factory=list)
    medical_history: Optional[str] = Field(None, alias="medicalHistory")
    emergency_contact: Optional[EmergencyContact] = Field(None, alias="emergencyContact")
    is_active: bool = Field(True, alias="isActive")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    class Config:
        json_schema_extra = {
            "example": {
                "_id": "65a1",
                "patientId": "PT-00012",
                "name": "Asha Rao",
                "age": 34,
                "gender": "Female",
                "phone": "9876543210",
                "allergies": ["penicillin"]
            }
        }


class PatientPage(BackendModel):
    patients: List[Patient] = Field(default_factory=list)
    pagination: Optional[Pagination] = None


class DoctorSchedule(BackendModel):
    day: str
    start_time: str = Field(..., alias="startTime")  # HH:MM
    end_time: str = Field(..., alias="endTime")  # HH:MM


class Doctor(BackendModel):
    """Doctor information."""
    id: Optional[str] = Field(None, alias="_id")
    doctor_id: Optional[str] = Field(None, alias="doctorId")
    name: str
    specialization: Optional[str] = None
    qualification: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    consultation_fee: Optional[float] = Field(None, alias="consultationFee")
    schedule: List[DoctorSchedule] = Field(default_factory=list)
    is_active: bool = Field(True, alias="isActive")

    @property
    def display_name(self) -> str:
        return self.name if self.name.lower().startswith("dr") else f"Dr. {self.name}"
