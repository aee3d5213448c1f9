"""
Unit tests for bill drafts and the billing service.

Covers the display totals, the checks run before a bill is submitted and the
request body each bill type sends.
"""

import asyncio

import pytest

from clinic_console.core.exceptions import BillValidationError
from clinic_console.models.billing import BillDraft, BillItem, calculate_discount
from clinic_console.models.enums import BillType, DiscountType, PaymentMode

from conftest import API_URL, body_of, ok


def _bill(**overrides):
    bill = {
        "_id": "b1",
        "billNo": "OPD-0001",
        "patientId": "p1",
        "items": [{"description": "Consultation", "quantity": 1, "rate": 500}],
        "subtotal": 500,
        "total": 500,
        "paymentMode": "cash",
    }
    bill.update(overrides)
    return bill


class TestBillTotals:
    """Subtotal, discount and total on a draft."""

    def test_subtotal_is_sum_of_quantity_times_rate(self):
        draft = BillDraft(bill_type=BillType.MISC, items=[
            BillItem(description="CBC", quantity=2, rate=250),
            BillItem(description="X-Ray", quantity=1, rate=800),
        ])
        assert draft.subtotal == 1300
        assert draft.total == 1300

    def test_percentage_discount(self):
        draft = BillDraft(
            bill_type=BillType.OPD,
            items=[BillItem(description="Consultation", quantity=1, rate=1000)],
            discount_type=DiscountType.PERCENTAGE,
            discount_value=10
        )
        assert draft.discount == 100
        assert draft.total == 900

    def test_fixed_discount(self):
        draft = BillDraft(
            bill_type=BillType.OPD,
            items=[BillItem(description="Consultation", quantity=1, rate=1000)],
            discount_type=DiscountType.FIXED,
            discount_value=150
        )
        assert draft.discount == 150
        assert draft.total == 850

    def test_calculate_discount_on_zero_subtotal(self):
        assert calculate_discount(0, DiscountType.PERCENTAGE, 50) == 0

    def test_new_draft_has_one_blank_row(self):
        draft = BillDraft(bill_type=BillType.OPD)
        assert len(draft.items) == 1
        assert draft.items[0].is_blank
        assert draft.subtotal == 0

    def test_remove_item_keeps_last_row(self):
        draft = BillDraft(bill_type=BillType.OPD)
        draft.add_item("Dressing", 1, 200)
        draft.remove_item(0)
        assert [item.description for item in draft.items] == ["Dressing"]
        draft.remove_item(0)
        assert len(draft.items) == 1


class TestBillValidation:
    """Checks run before a bill is sent."""

    def test_blank_rows_are_dropped(self):
        draft = BillDraft(bill_type=BillType.MISC, patient_id="p1", items=[
            BillItem(description="CBC", quantity=1, rate=250),
            BillItem(description="   ", quantity=3, rate=100),
        ])
        payload = draft.to_request()
        assert [item["description"] for item in payload["items"]] == ["CBC"]

    def test_only_blank_rows_is_refused(self):
        draft = BillDraft(bill_type=BillType.MISC, patient_id="p1", items=[BillItem(description="")])
        with pytest.raises(BillValidationError, match="Please add at least one item"):
            draft.validate_for_submit()

    def test_opd_requires_patient(self):
        draft = BillDraft(bill_type=BillType.OPD, doctor_id="d1", items=[BillItem(description="Consultation", rate=500)])
        with pytest.raises(BillValidationError, match="Please select a patient"):
            draft.validate_for_submit()

    def test_opd_requires_doctor(self):
        draft = BillDraft(bill_type=BillType.OPD, patient_id="p1", items=[BillItem(description="Consultation", rate=500)])
        with pytest.raises(BillValidationError, match="Please select a doctor"):
            draft.validate_for_submit()

    def test_misc_does_not_require_doctor(self):
        draft = BillDraft(bill_type=BillType.MISC, patient_id="p1", items=[BillItem(description="CBC", rate=250)])
        draft.validate_for_submit()

    def test_medicine_requires_patient_or_walk_in_name(self):
        draft = BillDraft(bill_type=BillType.MEDICINE, walk_in_name="  ", items=[BillItem(description="Paracetamol", rate=20)])
        with pytest.raises(BillValidationError, match="walk-in customer name"):
            draft.validate_for_submit()

    def test_medicine_walk_in_payload(self):
        draft = BillDraft(
            bill_type=BillType.MEDICINE,
            walk_in_name=" Ravi ",
            walk_in_phone="9876543210",
            items=[BillItem(description="Paracetamol", quantity=10, rate=2)]
        )
        payload = draft.to_request()
        assert payload["patientName"] == "Ravi"
        assert payload["patientPhone"] == "9876543210"
        assert "patientId" not in payload

    def test_medicine_registered_patient_payload(self):
        draft = BillDraft(bill_type=BillType.MEDICINE, patient_id="p1", items=[BillItem(description="Paracetamol", rate=2)])
        payload = draft.to_request()
        assert payload["patientId"] == "p1"
        assert "patientName" not in payload

    def test_mixed_payment_is_not_allowed_for_new_bills(self):
        draft = BillDraft(
            bill_type=BillType.MISC,
            patient_id="p1",
            payment_mode=PaymentMode.MIXED,
            items=[BillItem(description="CBC", rate=250)]
        )
        with pytest.raises(BillValidationError):
            draft.validate_for_submit()

    def test_opd_payload_fields(self):
        draft = BillDraft(
            bill_type=BillType.OPD,
            patient_id="p1",
            doctor_id="d1",
            appointment_id="a1",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=5,
            payment_mode=PaymentMode.UPI,
            items=[BillItem(description="Consultation", quantity=1, rate=500)]
        )
        payload = draft.to_request()
        assert payload["patientId"] == "p1"
        assert payload["doctorId"] == "d1"
        assert payload["appointmentId"] == "a1"
        assert payload["discountType"] == "percentage"
        assert payload["discountValue"] == 5
        assert payload["paymentMode"] == "upi"


class TestBillingService:
    """Bill books against a fake backend."""

    def test_create_posts_to_bill_type_path(self, console, server):
        server.api("POST", "/billing/opd", json=ok({"bill": _bill()}))
        draft = console.billing.opd.new_draft(
            patient_id="p1",
            doctor_id="d1",
            items=[BillItem(description="Consultation", quantity=1, rate=500)]
        )

        bill = asyncio.run(console.billing.opd.create(draft))

        assert bill.bill_no == "OPD-0001"
        request = server.calls_to("POST", f"{API_URL}/billing/opd")[0]
        assert body_of(request)["items"] == [{"description": "Consultation", "quantity": 1, "rate": 500}]

    def test_invalid_draft_never_reaches_backend(self, console, server):
        draft = console.billing.misc.new_draft(items=[BillItem(description="CBC", rate=250)])
        with pytest.raises(BillValidationError):
            asyncio.run(console.billing.misc.create(draft))
        assert server.calls == []

    def test_backend_total_is_authoritative(self, console, server):
        server.api("POST", "/billing/misc", json=ok({"bill": _bill(billNo="MISC-0009", subtotal=250, total=225)}))
        draft = console.billing.misc.new_draft(patient_id="p1", items=[BillItem(description="CBC", rate=250)])

        bill = asyncio.run(console.billing.misc.create(draft))

        assert draft.total == 250
        assert bill.total == 225

    def test_draft_for_other_book_is_refused(self, console):
        draft = console.billing.opd.new_draft(patient_id="p1", doctor_id="d1")
        with pytest.raises(ValueError):
            asyncio.run(console.billing.misc.create(draft))

    def test_list_sends_date_filters(self, console, server):
        server.api("GET", "/billing/medicine", json=ok({"bills": [_bill(_id="b2")], "pagination": {"page": 1, "pages": 1, "total": 1}}))

        page = asyncio.run(console.billing.book(BillType.MEDICINE).list(date_from="2024-01-01", date_to="2024-01-31"))

        assert [bill.id for bill in page.bills] == ["b2"]
        params = server.calls[0].url.params
        assert params["dateFrom"] == "2024-01-01"
        assert params["dateTo"] == "2024-01-31"
        assert "page" not in params
