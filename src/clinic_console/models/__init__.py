"""
Pydantic models for the clinic console.
"""

from .enums import (
    AppointmentStatus,
    AppointmentType,
    Gender,
    BillType,
    DiscountType,
    PaymentMode,
    UserRole,
    ServiceCategory,
    WhatsAppSessionStatus,
    OnboardingStep,
    SetupStep,
)

from .common import (
    BackendModel,
    Address,
    Pagination,
)

from .auth import (
    User,
    Tenant,
    Subscription,
    OnboardingState,
    LoginResult,
    ActivationTarget,
)

from .patients import (
    Patient,
    PatientPage,
    Doctor,
)

from .appointments import (
    Appointment,
    AppointmentPage,
    StatusAction,
    next_action,
    available_actions,
    check_transition,
)

from .billing import (
    Bill,
    BillItem,
    BillPage,
    BillDraft,
)

from .inventory import (
    Medicine,
    MedicinePage,
    StockBatch,
    ServiceItem,
)

from .clinic import (
    ClinicSettings,
    SettingsBundle,
    StaffUser,
    OnboardingStatus,
)

from .admin import (
    TenantSummary,
    TenantPage,
    AdminDashboard,
    Impersonation,
    TenantStats,
    TenantUser,
    TenantDetails,
)

from .whatsapp import (
    WhatsAppSession,
    WhatsAppQRCode,
    BackendWhatsAppIntegration,
    CombinedSession,
)

from .dashboard import (
    DashboardStats,
)

from .reports import (
    CollectionReport,
    AppointmentReport,
    PatientReport,
)

__all__ = [
    # Enums
    "AppointmentStatus",
    "AppointmentType",
    "Gender",
    "BillType",
    "DiscountType",
    "PaymentMode",
    "UserRole",
    "ServiceCategory",
    "WhatsAppSessionStatus",
    "OnboardingStep",
    "SetupStep",
    # Common
    "BackendModel",
    "Address",
    "Pagination",
    # Auth
    "User",
    "Tenant",
    "Subscription",
    "OnboardingState",
    "LoginResult",
    "ActivationTarget",
    # Patients & doctors
    "Patient",
    "PatientPage",
    "Doctor",
    # Appointments
    "Appointment",
    "AppointmentPage",
    "StatusAction",
    "next_action",
    "available_actions",
    "check_transition",
    # Billing
    "Bill",
    "BillItem",
    "BillPage",
    "BillDraft",
    # Inventory
    "Medicine",
    "MedicinePage",
    "StockBatch",
    "ServiceItem",
    # Clinic
    "ClinicSettings",
    "SettingsBundle",
    "StaffUser",
    "OnboardingStatus",
    # Super admin
    "TenantSummary",
    "TenantPage",
    "AdminDashboard",
    "Impersonation",
    "TenantStats",
    "TenantUser",
    "TenantDetails",
    # WhatsApp
    "WhatsAppSession",
    "WhatsAppQRCode",
    "BackendWhatsAppIntegration",
    "CombinedSession",
    # Dashboard
    "DashboardStats",
    # Reports
    "CollectionReport",
    "AppointmentReport",
    "PatientReport",
]
