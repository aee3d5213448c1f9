"""
Report Service

Collection, appointment and patient reports over a date range, built from the
billing and appointment listings. Reports can be written out as CSV.
"""

import asyncio
import csv
import logging
from datetime import date
from typing import Optional, Tuple, Union

from clinic_console.models.enums import AppointmentStatus
from clinic_console.models.reports import AppointmentReport, CollectionReport, PatientReport

from .appointments import AppointmentService
from .billing import BillingService
from .patients import PatientService

logger = logging.getLogger(__name__)

# The appointments listing has no date-range filter, so one large page is
# fetched and filtered here
APPOINTMENT_FETCH_LIMIT = 1000

PENDING_STATUSES = {
    AppointmentStatus.SCHEDULED,
    AppointmentStatus.CHECKED_IN,
    AppointmentStatus.IN_PROGRESS,
}

Report = Union[CollectionReport, AppointmentReport, PatientReport]


def default_range(today: Optional[date] = None) -> Tuple[str, str]:
    """First day of the current month through today."""
    today = today or date.today()
    return today.replace(day=1).isoformat(), today.isoformat()


class ReportService:
    def __init__(
        self,
        billing: BillingService,
        appointments: AppointmentService,
        patients: PatientService
    ):
        self.billing = billing
        self.appointments = appointments
        self.patients = patients

    @staticmethod
    def _range(date_from: Optional[str], date_to: Optional[str]) -> Tuple[str, str]:
        default_from, default_to = default_range()
        return date_from or default_from, date_to or default_to

    async def collection(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> CollectionReport:
        date_from, date_to = self._range(date_from, date_to)
        opd, misc, medicine = await asyncio.gather(
            self.billing.opd.list(date_from=date_from, date_to=date_to),
            self.billing.misc.list(date_from=date_from, date_to=date_to),
            self.billing.medicine.list(date_from=date_from, date_to=date_to),
        )
        report = CollectionReport(
            date_from=date_from,
            date_to=date_to,
            opd=sum(bill.total for bill in opd.bills),
            misc=sum(bill.total for bill in misc.bills),
            medicine=sum(bill.total for bill in medicine.bills),
        )
        logger.info(f"📊 Collection {date_from}..{date_to}: {report.total:.2f}")
        return report

    async def appointments_summary(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None
    ) -> AppointmentReport:
        date_from, date_to = self._range(date_from, date_to)
        page = await self.appointments.list(limit=APPOINTMENT_FETCH_LIMIT)

        report = AppointmentReport(date_from=date_from, date_to=date_to)
        for appointment in page.appointments:
            day = appointment.date.split("T")[0]
            if not date_from <= day <= date_to:
                continue
            report.total += 1
            if appointment.status == AppointmentStatus.COMPLETED:
                report.completed += 1
            elif appointment.status == AppointmentStatus.CANCELLED:
                report.cancelled += 1
            elif appointment.status in PENDING_STATUSES:
                report.pending += 1
        return report

    async def patient_count(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> PatientReport:
        """Total registered patients; the range only labels the export."""
        date_from, date_to = self._range(date_from, date_to)
        page = await self.patients.list(limit=1)
        total = page.pagination.total if page.pagination else 0
        return PatientReport(date_from=date_from, date_to=date_to, total_patients=total)


def report_filename(kind: str, report: Report) -> str:
    return f"{kind}-report-{report.date_from}-to-{report.date_to}.csv"


def write_csv(report: Report, path: str):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerows(report.rows())
    logger.info(f"✅ Report written to {path}")
