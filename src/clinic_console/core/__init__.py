"""
Core components for the clinic console.
"""

from .config import settings, Settings
from .credential_store import (
    CredentialStore,
    CredentialBackend,
    InMemoryBackend,
    FileBackend,
    RedisBackend,
    create_backend,
)
from .exceptions import (
    ClinicConsoleError,
    ApiError,
    ValidationError,
    BillValidationError,
    TransitionBlockedError,
    ConfirmationMismatchError,
    NotAuthenticatedError,
)
from .navigation import Navigator
from .confirmation import require_confirmation, confirmation_matches

__all__ = [
    # Config
    "settings",
    "Settings",
    # Credentials
    "CredentialStore",
    "CredentialBackend",
    "InMemoryBackend",
    "FileBackend",
    "RedisBackend",
    "create_backend",
    # Errors
    "ClinicConsoleError",
    "ApiError",
    "ValidationError",
    "BillValidationError",
    "TransitionBlockedError",
    "ConfirmationMismatchError",
    "NotAuthenticatedError",
    # Navigation
    "Navigator",
    # Confirmation
    "require_confirmation",
    "confirmation_matches",
]
