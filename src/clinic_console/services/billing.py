"""
Billing Service

OPD, Misc (lab/radiology) and Medicine bills live in separate backend
collections that share one request shape.
"""

import logging
from typing import Optional, Dict

from clinic_console.infrastructure.http_client import ApiClient, unwrap
from clinic_console.models.billing import Bill, BillPage, BillDraft
from clinic_console.models.enums import BillType

logger = logging.getLogger(__name__)


class BillBook:
    """Operations on one bill type."""

    def __init__(self, api: ApiClient, bill_type: BillType):
        self.api = api
        self.bill_type = BillType(bill_type)
        self.path = f"/billing/{self.bill_type.value}"

    async def list(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        patient_id: Optional[str] = None
    ) -> BillPage:
        body = await self.api.get(self.path, params={
            "page": page,
            "limit": limit,
            "dateFrom": date_from,
            "dateTo": date_to,
            "patientId": patient_id,
        })
        return BillPage(**unwrap(body, default={}))

    async def get(self, bill_id: str) -> Bill:
        body = await self.api.get(f"{self.path}/{bill_id}")
        return Bill(**unwrap(body, "bill"))

    def new_draft(self, **fields) -> BillDraft:
        return BillDraft(bill_type=self.bill_type, **fields)

    async def create(self, draft: BillDraft) -> Bill:
        """
        Validate the draft on the client and submit it.

        The returned bill carries the backend's totals, which may differ from
        the draft's display figures.

        Raises:
            BillValidationError: before any request is made
        """
        if BillType(draft.bill_type) != self.bill_type:
            raise ValueError(f"Draft is a {draft.bill_type} bill, not {self.bill_type.value}")
        payload = draft.to_request()
        body = await self.api.post(self.path, payload)
        bill = Bill(**unwrap(body, "bill"))
        if abs(bill.total - draft.total) > 0.005:
            logger.warning(
                f"Backend total {bill.total} differs from draft total {draft.total} for {bill.bill_no}"
            )
        logger.info(f"✅ {self.bill_type.value.upper()} bill created: {bill.bill_no} total {bill.total}")
        return bill


class BillingService:
    def __init__(self, api: ApiClient):
        self.api = api
        self.opd = BillBook(api, BillType.OPD)
        self.misc = BillBook(api, BillType.MISC)
        self.medicine = BillBook(api, BillType.MEDICINE)
        self._books: Dict[BillType, BillBook] = {
            BillType.OPD: self.opd,
            BillType.MISC: self.misc,
            BillType.MEDICINE: self.medicine,
        }

    def book(self, bill_type: BillType) -> BillBook:
        return self._books[BillType(bill_type)]
