"""
Typed confirmation for destructive actions.

The operator has to type the target's identifier (tenant ID, user email)
before a delete is sent. The comparison is exact: no trimming, no case folding.
"""

import logging

from .exceptions import ConfirmationMismatchError

logger = logging.getLogger(__name__)


def confirmation_matches(typed: str, expected: str) -> bool:
    return bool(expected) and typed == expected


def require_confirmation(typed: str, expected: str, what: str = "identifier"):
    """
    Raises:
        ConfirmationMismatchError: unless typed is exactly expected
    """
    if not confirmation_matches(typed, expected):
        logger.warning(f"Refusing delete: typed confirmation does not match the {what}")
        raise ConfirmationMismatchError(f"Please enter the correct {what} to confirm")
