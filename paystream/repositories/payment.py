import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from paystream.core.clock import as_utc
from paystream.core.exceptions import InvalidStatusTransitionError, NotCancellableError
from paystream.models.payment import (
    TERMINAL_STATUSES,
    Payment,
    PaymentStatus,
    can_transition,
)
from paystream.repositories.base import Repository

logger = logging.getLogger(__name__)


class PaymentRepository(Repository[Payment]):
    model = Payment
    resource_type = "Payment"

    def update(self, record_id: str, fields: Dict[str, Any]) -> Payment:
        """Partial update; a status change must follow the allowed lifecycle.

        Completed, failed and cancelled payments are immutable: any write to
        one raises InvalidStatusTransitionError.
        """
        payment = self.get(record_id)
        if PaymentStatus(payment.status) in TERMINAL_STATUSES:
            requested = PaymentStatus(fields["status"]).value if "status" in fields else payment.status
            raise InvalidStatusTransitionError(
                payment.status,
                requested,
                payment_id=payment.id,
                message=f"Payment {payment.id} is '{payment.status}' and can no longer be modified",
            )
        if "status" in fields:
            requested = PaymentStatus(fields["status"]).value
            if requested != payment.status and not can_transition(payment.status, requested):
                raise InvalidStatusTransitionError(payment.status, requested, payment_id=payment.id)
            fields = {**fields, "status": requested}
        return super().update(record_id, fields)

    def mark_completed(self, payment_id: str, transaction_hash: str) -> Payment:
        return self.update(payment_id, {
            "status": PaymentStatus.COMPLETED,
            "transaction_hash": transaction_hash,
            "error_message": None,
        })

    def mark_failed(self, payment_id: str, error_message: str) -> Payment:
        return self.update(payment_id, {
            "status": PaymentStatus.FAILED,
            "error_message": error_message,
        })

    def cancel(self, payment_id: str) -> Payment:
        payment = self.get(payment_id)
        if payment.status != PaymentStatus.SCHEDULED.value:
            raise NotCancellableError(payment.id, payment.status)
        return self.update(payment_id, {"status": PaymentStatus.CANCELLED})

    def for_company(self, company_id: str, status: Optional[str] = None, limit: Optional[int] = None) -> List[Payment]:
        query = self.db.query(Payment).filter(Payment.company_id == company_id)
        if status:
            query = query.filter(Payment.status == PaymentStatus(status).value)
        query = query.order_by(Payment.payment_date.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def latest_completed_date(self, company_id: str) -> Optional[datetime]:
        """Most recent completed payment date of any type, or None."""
        dates = [
            as_utc(p.payment_date)
            for p in self.db.query(Payment).filter(
                Payment.company_id == company_id,
                Payment.status == PaymentStatus.COMPLETED.value,
            ).all()
        ]
        return max(dates) if dates else None

    def due_scheduled(self, company_id: str, now: datetime) -> List[Payment]:
        """Scheduled payments whose date has passed."""
        scheduled = self.db.query(Payment).filter(
            Payment.company_id == company_id,
            Payment.status == PaymentStatus.SCHEDULED.value,
        ).all()
        now = as_utc(now)
        return [p for p in scheduled if as_utc(p.payment_date) <= now]
