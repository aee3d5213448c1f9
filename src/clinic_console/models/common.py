"""
Base model and small value objects shared by the backend DTOs.
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel


class BackendModel(BaseModel):
    """
    DTO mirrored from a backend response.

    Backend fields are camelCase; models declare them as aliases and accept
    either name when built from Python.
    """

    class Config:
        populate_by_name = True
        extra = "ignore"

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for a request body, skipping unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Address(BackendModel):
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    country: Optional[str] = None

    def one_line(self) -> str:
        parts = [self.line1, self.line2, self.city, self.state, self.pincode, self.country]
        return ", ".join(p for p in parts if p)


class Pagination(BackendModel):
    page: int = 1
    limit: int = 0
    total: int = 0
    pages: int = 1
