"""
Unit tests for the collection, appointment and patient reports.
"""

import asyncio
import csv
from datetime import date

from clinic_console.services.reports import default_range, report_filename, write_csv

from conftest import ok


def _bills(*totals):
    return ok({"bills": [{"_id": f"b{i}", "total": total} for i, total in enumerate(totals)]})


def _appointment(day, status):
    return {"_id": f"a-{day}-{status}", "date": day, "status": status}


class TestDefaultRange:
    def test_month_to_date(self):
        assert default_range(date(2025, 3, 18)) == ("2025-03-01", "2025-03-18")


class TestCollectionReport:
    """Sums bill totals per bill type."""

    def test_totals_per_book(self, console, server):
        server.api("GET", "/billing/opd", json=_bills(500, 300.5))
        server.api("GET", "/billing/misc", json=_bills(250))
        server.api("GET", "/billing/medicine", json=ok({"bills": []}))

        report = asyncio.run(console.reports.collection("2025-03-01", "2025-03-31"))

        assert report.opd == 800.5
        assert report.misc == 250
        assert report.medicine == 0
        assert report.total == 1050.5

    def test_date_range_is_sent_to_every_book(self, console, server):
        for book in ("opd", "misc", "medicine"):
            server.api("GET", f"/billing/{book}", json=_bills())

        asyncio.run(console.reports.collection("2025-03-01", "2025-03-31"))

        assert len(server.calls) == 3
        for call in server.calls:
            assert dict(call.url.params) == {"dateFrom": "2025-03-01", "dateTo": "2025-03-31"}


class TestAppointmentReport:
    """Counts by outcome inside the date range."""

    def test_counts_within_range(self, console, server):
        server.api("GET", "/appointments", json=ok({"appointments": [
            _appointment("2025-02-28", "completed"),
            _appointment("2025-03-01", "completed"),
            _appointment("2025-03-05T09:30:00.000Z", "cancelled"),
            _appointment("2025-03-10", "scheduled"),
            _appointment("2025-03-10", "checked-in"),
            _appointment("2025-03-31", "in-progress"),
            _appointment("2025-04-01", "scheduled"),
        ]}))

        report = asyncio.run(console.reports.appointments_summary("2025-03-01", "2025-03-31"))

        assert (report.total, report.completed, report.cancelled, report.pending) == (5, 1, 1, 3)
        assert server.calls[0].url.params["limit"] == "1000"

    def test_empty_range(self, console, server):
        server.api("GET", "/appointments", json=ok({"appointments": [_appointment("2025-01-10", "completed")]}))

        report = asyncio.run(console.reports.appointments_summary("2025-03-01", "2025-03-31"))

        assert report.total == 0


class TestPatientReport:
    def test_count_from_pagination(self, console, server):
        server.api("GET", "/patients", json=ok({"patients": [{"_id": "p1", "name": "Asha", "phone": "999"}], "pagination": {"total": 412}}))

        report = asyncio.run(console.reports.patient_count())

        assert report.total_patients == 412
        assert server.calls[0].url.params["limit"] == "1"

    def test_missing_pagination_counts_zero(self, console, server):
        server.api("GET", "/patients", json=ok({"patients": []}))

        assert asyncio.run(console.reports.patient_count()).total_patients == 0


class TestCsvExport:
    def test_collection_csv(self, console, server, tmp_path):
        server.api("GET", "/billing/opd", json=_bills(500))
        server.api("GET", "/billing/misc", json=_bills(250))
        server.api("GET", "/billing/medicine", json=_bills(120))
        report = asyncio.run(console.reports.collection("2025-03-01", "2025-03-31"))
        path = tmp_path / report_filename("collection", report)

        write_csv(report, str(path))

        assert path.name == "collection-report-2025-03-01-to-2025-03-31.csv"
        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["Report Type", "Amount"]
        assert [row[0] for row in rows[1:]] == ["OPD Bills", "Lab/Misc Bills", "Medicine Bills", "Total"]
        assert float(rows[-1][1]) == 870
