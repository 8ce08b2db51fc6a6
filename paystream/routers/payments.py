"""
Payments Router

Payment history, one-off bonus scheduling and cancellation.
Execution is triggered from the scheduler router.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from paystream.database import get_db
from paystream.models.payment import PaymentStatus
from paystream.schemas.payment import BonusCreate, PaymentResponse
from paystream.services import payment_service

router = APIRouter(tags=["Payments"])


@router.get("/companies/{company_id}/payments", response_model=List[PaymentResponse])
def list_payments(
    company_id: str,
    status: Optional[PaymentStatus] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """Company payment history, newest payment date first."""
    return payment_service.list_payments(
        db, company_id, status=status.value if status else None, limit=limit
    )


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: str, db: Session = Depends(get_db)):
    return payment_service.get_payment(db, payment_id)


@router.post("/payments/bonus", response_model=PaymentResponse, status_code=201)
def schedule_bonus(bonus: BonusCreate, db: Session = Depends(get_db)):
    """Schedule a one-off bonus; it runs on the first bonus trigger at or after payment_date."""
    return payment_service.schedule_bonus(db, bonus.employee_id, bonus.amount, bonus.payment_date)


@router.post("/payments/{payment_id}/cancel", response_model=PaymentResponse)
def cancel_payment(payment_id: str, db: Session = Depends(get_db)):
    """Cancel a scheduled payment. Anything else answers 409 and is left unchanged."""
    return payment_service.cancel_scheduled_payment(db, payment_id)
