"""
Service layer: one class per backend resource.
"""

from .auth import AuthService
from .patients import PatientService
from .doctors import DoctorService
from .appointments import AppointmentService
from .billing import BillBook, BillingService
from .inventory import MedicineService, ServiceItemService
from .clinic import SettingsService, UserService, DashboardService
from .onboarding import OnboardingService, file_to_base64, next_step
from .admin import SuperAdminService
from .whatsapp import WhatsAppIntegrationService
from .reports import ReportService, default_range, report_filename, write_csv
from .console import ClinicConsole, get_console, reset_console

__all__ = [
    "AuthService",
    "PatientService",
    "DoctorService",
    "AppointmentService",
    "BillBook",
    "BillingService",
    "MedicineService",
    "ServiceItemService",
    "SettingsService",
    "UserService",
    "DashboardService",
    "OnboardingService",
    "file_to_base64",
    "next_step",
    "SuperAdminService",
    "WhatsAppIntegrationService",
    "ReportService",
    "default_range",
    "report_filename",
    "write_csv",
    "ClinicConsole",
    "get_console",
    "reset_console",
]
