"""
Exception hierarchy for the clinic console.

Remote failures surface as ApiError; refusals made on the client before any
request is sent derive from ValidationError.
"""

from typing import Optional, Dict, Any

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."
MISSING_TOKEN_MESSAGE = "Unexpected response from server: no session token"


class ClinicConsoleError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiError(ClinicConsoleError):
    """A request to the backend or the WhatsApp gateway was rejected or failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
        network: bool = False
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}
        self.network = network

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_network_error(self) -> bool:
        """No response was received."""
        return self.network

    @classmethod
    def from_payload(cls, status_code: int, payload: Any) -> "ApiError":
        """Build an error from a decoded error body ({error} or {detail})."""
        if isinstance(payload, dict):
            message = payload.get("error") or payload.get("message") or payload.get("detail")
            if isinstance(message, list):
                # FastAPI-style validation detail
                message = "; ".join(str(item.get("msg", item)) if isinstance(item, dict) else str(item) for item in message)
            body = payload
        else:
            message = None
            body = {"raw": payload} if payload else {}
        return cls(str(message or f"HTTP {status_code}"), status_code=status_code, payload=body)

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code!r}, message={self.message!r})"


class ValidationError(ClinicConsoleError):
    """Client-side refusal to submit a request."""


class BillValidationError(ValidationError):
    pass


class TransitionBlockedError(ValidationError):
    pass


class ConfirmationMismatchError(ValidationError):
    pass


class NotAuthenticatedError(ValidationError):
    pass
