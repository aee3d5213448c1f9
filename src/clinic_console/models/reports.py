"""
Report models.

Reports are computed on the client from the bill and appointment listings.
Each report knows its CSV rows (header first).
"""

from typing import Any, List, Tuple

from pydantic import BaseModel

Row = Tuple[str, Any]


class CollectionReport(BaseModel):
    """Money collected per bill type over a date range."""
    date_from: str
    date_to: str
    opd: float = 0.0
    misc: float = 0.0
    medicine: float = 0.0

    @property
    def total(self) -> float:
        return self.opd + self.misc + self.medicine

    def rows(self) -> List[Row]:
        return [
            ("Report Type", "Amount"),
            ("OPD Bills", self.opd),
            ("Lab/Misc Bills", self.misc),
            ("Medicine Bills", self.medicine),
            ("Total", self.total),
        ]


class AppointmentReport(BaseModel):
    """Appointment counts by outcome; pending covers every open status."""
    date_from: str
    date_to: str
    total: int = 0
    completed: int = 0
    cancelled: int = 0
    pending: int = 0

    def rows(self) -> List[Row]:
        return [
            ("Status", "Count"),
            ("Total", self.total),
            ("Completed", self.completed),
            ("Cancelled", self.cancelled),
            ("Pending", self.pending),
        ]


class PatientReport(BaseModel):
    date_from: str
    date_to: str
    total_patients: int = 0

    def rows(self) -> List[Row]:
        return [
            ("Metric", "Value"),
            ("Total Patients", self.total_patients),
        ]
