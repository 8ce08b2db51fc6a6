"""
Payment Service Layer

Store-side payment operations used by the routers and the scheduler:
listing a company's payments, scheduling one-off bonuses and cancelling them.
Execution of payments lives in payment_executor.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from paystream.core.clock import as_utc
from paystream.core.exceptions import AppException
from paystream.models.payment import Payment, PaymentStatus, PaymentType
from paystream.repositories.company import CompanyRepository
from paystream.repositories.employee import EmployeeRepository
from paystream.repositories.payment import PaymentRepository

logger = logging.getLogger(__name__)


def list_payments(
    db: Session,
    company_id: str,
    status: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Payment]:
    CompanyRepository(db).get(company_id)
    return PaymentRepository(db).for_company(company_id, status=status, limit=limit)


def get_payment(db: Session, payment_id: str) -> Payment:
    return PaymentRepository(db).get(payment_id)


def schedule_bonus(db: Session, employee_id: str, amount: Decimal, date: datetime) -> Payment:
    """
    Create a one-off bonus payment for an employee, to be executed on or after *date*.

    Raises:
        NotFoundError: the employee does not exist.
        AppException: the amount is not positive.
    """
    amount = Decimal(amount)
    if amount <= 0:
        raise AppException(
            message="Bonus amount must be positive",
            status_code=422,
            error_code="INVALID_AMOUNT",
            details={"amount": str(amount)},
        )

    employee = EmployeeRepository(db).get(employee_id)
    payment = PaymentRepository(db).create({
        "company_id": employee.company_id,
        "employee_id": employee.id,
        "amount": amount,
        "payment_date": as_utc(date),
        "status": PaymentStatus.SCHEDULED.value,
        "payment_type": PaymentType.BONUS.value,
    })
    logger.info(f"Scheduled bonus {payment.id} of {amount} for employee {employee.id} on {payment.payment_date}")
    return payment


def cancel_scheduled_payment(db: Session, payment_id: str) -> Payment:
    """
    Cancel a payment that has not run yet.

    Raises:
        NotFoundError: no such payment.
        NotCancellableError: the payment is not in the scheduled state; it is left unchanged.
    """
    payment = PaymentRepository(db).cancel(payment_id)
    logger.info(f"Cancelled scheduled payment {payment.id}")
    return payment
