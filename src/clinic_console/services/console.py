"""
Wires the credential store, navigator, backend client, WhatsApp gateway and
every service into one object the CLI (or an embedding app) can hold on to.
"""

import logging
from typing import Optional

import httpx

from clinic_console.core.credential_store import CredentialStore
from clinic_console.core.navigation import Navigator
from clinic_console.core.whatsapp_setup import WhatsAppSetupWizard
from clinic_console.infrastructure.http_client import ApiClient
from clinic_console.infrastructure.whatsapp_gateway import WhatsAppGatewayClient

from .admin import SuperAdminService
from .appointments import AppointmentService
from .auth import AuthService
from .billing import BillingService
from .clinic import SettingsService, UserService, DashboardService
from .doctors import DoctorService
from .inventory import MedicineService, ServiceItemService
from .onboarding import OnboardingService
from .patients import PatientService
from .reports import ReportService
from .whatsapp import WhatsAppIntegrationService

logger = logging.getLogger(__name__)


class ClinicConsole:
    """All clinic services sharing one credential store and navigator."""

    def __init__(
        self,
        store: Optional[CredentialStore] = None,
        navigator: Optional[Navigator] = None,
        api_url: Optional[str] = None,
        whatsapp_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.store = store or CredentialStore()
        self.navigator = navigator or Navigator()
        self.api = ApiClient(self.store, self.navigator, base_url=api_url, transport=transport)
        self.gateway = WhatsAppGatewayClient(self.store, base_url=whatsapp_url, transport=transport)

        self.auth = AuthService(self.api)
        self.patients = PatientService(self.api)
        self.doctors = DoctorService(self.api)
        self.appointments = AppointmentService(self.api)
        self.billing = BillingService(self.api)
        self.medicines = MedicineService(self.api)
        self.services = ServiceItemService(self.api)
        self.settings = SettingsService(self.api)
        self.users = UserService(self.api)
        self.onboarding = OnboardingService(self.api)
        self.dashboard = DashboardService(self.api)
        self.whatsapp = WhatsAppIntegrationService(self.api)
        self.admin = SuperAdminService(self.api)
        self.reports = ReportService(self.billing, self.appointments, self.patients)
        logger.debug("ClinicConsole initialized")

    def whatsapp_wizard(self, **kwargs) -> WhatsAppSetupWizard:
        return WhatsAppSetupWizard(self.gateway, self.whatsapp, **kwargs)


# Global console instance
_console: Optional[ClinicConsole] = None


def get_console() -> ClinicConsole:
    """Get or create the global console instance."""
    global _console
    if _console is None:
        _console = ClinicConsole()
    return _console


def reset_console():
    """Reset the global console (useful for testing)."""
    global _console
    _console = None
