# meditrack/services/billing_service.py
from datetime import datetime
from typing import Callable, Dict, List, Optional

import structlog

from .. import validator
from ..compliance_logger import ComplianceLogger
from ..exceptions import BillNotFoundError
from ..models import Bill, BillStatus, BillSummary
from .base import BaseRegistry

logger = structlog.get_logger(__name__)


class BillingLedger(BaseRegistry[Bill]):
    """Bills, one per appointment. Payment is a status flip, reversible via cancel_payment."""

    entity_name = "bill"
    audit_category = "BILLING"

    def __init__(
        self,
        enforce_unique_ids: bool = True,
        audit: Optional[ComplianceLogger] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__(enforce_unique_ids=enforce_unique_ids, audit=audit)
        self._clock = clock

    def _require(self, bill_id: int) -> Bill:
        bill = self.find_by_id(bill_id)
        if bill is None:
            logger.warning("bill_not_found", bill_id=bill_id)
            raise BillNotFoundError(f"Bill not found with ID: {bill_id}")
        return bill

    def create(self, bill: Bill) -> None:
        self._admit(bill, validator.validate_bill)

    def pay(self, bill_id: int) -> bool:
        """Mark a pending bill paid.

        Paying an already paid bill is not an error: the current status is
        logged and False is returned.
        """
        bill = self._require(bill_id)
        if not bill.pay(paid_at=self._clock()):
            logger.info("bill_already_settled", bill_id=bill_id, status=bill.status.value)
            return False
        logger.info("bill_paid", bill_id=bill_id, amount=bill.amount)
        self.audit.log_event(
            action="PAY_BILL",
            category=self.audit_category,
            resource_type=self.entity_name,
            resource_id=bill_id,
            details=f"Paid {bill.amount:.2f}",
        )
        return True

    def cancel_payment(self, bill_id: int) -> bool:
        """Reverse a payment. A bill that is not paid is left alone and False is returned."""
        bill = self._require(bill_id)
        if not bill.cancel_payment():
            logger.info("bill_payment_not_cancelable", bill_id=bill_id, status=bill.status.value)
            return False
        logger.info("bill_payment_canceled", bill_id=bill_id)
        self.audit.log_event(
            action="CANCEL_PAYMENT",
            category=self.audit_category,
            resource_type=self.entity_name,
            resource_id=bill_id,
            details="Payment reversed",
        )
        return True

    def is_paid(self, bill_id: int) -> bool:
        bill = self.find_by_id(bill_id)
        return bill.is_paid if bill is not None else False

    def find_by_status(self, status: BillStatus) -> List[Bill]:
        return [b for b in self._records if b.status == status]

    def total_amount_by_status(self, status: BillStatus) -> float:
        return sum(b.amount for b in self._records if b.status == status)

    def statistics(self) -> Dict[str, float]:
        total = sum(b.amount for b in self._records)
        return {
            "total": total,
            "paid": self.total_amount_by_status(BillStatus.PAID),
            "pending": self.total_amount_by_status(BillStatus.PENDING),
            "average": total / len(self._records) if self._records else 0.0,
        }

    def group_by_status(self) -> Dict[BillStatus, List[Bill]]:
        groups: Dict[BillStatus, List[Bill]] = {}
        for bill in self._records:
            groups.setdefault(bill.status, []).append(bill)
        return groups

    def unpaid_sorted_by_amount(self) -> List[Bill]:
        # Largest first; equal amounts keep insertion order
        unpaid = [b for b in self._records if b.status != BillStatus.PAID]
        return sorted(unpaid, key=lambda b: b.amount, reverse=True)

    def summarize(self) -> BillSummary:
        summary = BillSummary(generated_at=self._clock())
        for bill in self._records:
            summary.add_bill(bill)
        return summary
