"""
Clinic Console v1.0

Python client and command line console for the clinic management backend:
- Patients, doctors and appointments
- OPD, lab and pharmacy billing
- Medicine inventory and rate card
- Staff users, clinic settings and onboarding
- WhatsApp connection via the WhatsApp gateway
- Super-admin tenant management
"""

__version__ = "1.0.0"
__author__ = "Clinic Console Team"

from .core.config import settings

__all__ = ["settings", "__version__"]
