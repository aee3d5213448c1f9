"""
Enumerations shared across the clinic console models.
"""

from enum import Enum


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    CHECKED_IN = "checked-in"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AppointmentType(str, Enum):
    NEW = "new"
    FOLLOW_UP = "follow-up"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class BillType(str, Enum):
    """Billing categories, each with its own backend collection."""
    OPD = "opd"
    MISC = "misc"
    MEDICINE = "medicine"


class DiscountType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class PaymentMode(str, Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    MIXED = "mixed"  # Only ever reported by the backend


# Modes a new bill may be created with
NEW_BILL_PAYMENT_MODES = (PaymentMode.CASH, PaymentMode.CARD, PaymentMode.UPI)


class UserRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    RECEPTIONIST = "receptionist"
    DOCTOR = "doctor"
    PHARMACIST = "pharmacist"
    ACCOUNTANT = "accountant"


class ServiceCategory(str, Enum):
    LABORATORY = "laboratory"
    RADIOLOGY = "radiology"
    PROCEDURE = "procedure"
    OTHER = "other"


class WhatsAppSessionStatus(str, Enum):
    INITIALIZING = "initializing"
    PENDING_QR = "pending_qr"
    LOGGED_IN = "logged_in"
    LOGGED_OUT = "logged_out"
    ERROR = "error"


class OnboardingStep(str, Enum):
    CLINIC_DETAILS = "clinic-details"
    BRANDING = "branding"
    DOCTOR = "doctor"


class SetupStep(str, Enum):
    """Steps of the WhatsApp session setup wizard."""
    AUTH = "auth"
    CREATE = "create"
    QR = "qr"
    SUCCESS = "success"
