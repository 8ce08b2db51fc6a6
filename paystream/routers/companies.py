"""
Companies Router

Registration and lookup of employer accounts and their payment cadence.
All business logic is delegated to the company service layer.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from paystream.database import get_db
from paystream.dependencies import get_scheduler
from paystream.schemas.company import (
    CompanyCreate,
    CompanyResponse,
    ScheduleStateResponse,
    ScheduleUpdate,
)
from paystream.services import company_service
from paystream.services.payment_scheduler import PaymentScheduler

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", response_model=CompanyResponse, status_code=201)
def register_company(company_in: CompanyCreate, db: Session = Depends(get_db)):
    """Register a company for the connected wallet."""
    return company_service.register_company(db, company_in.model_dump())


@router.get("", response_model=List[CompanyResponse])
def list_companies(
    search: Optional[str] = Query(None, description="Case-insensitive match on any field"),
    db: Session = Depends(get_db),
):
    return company_service.search_companies(db, search)


@router.get("/by-wallet/{wallet_address}", response_model=CompanyResponse)
def get_company_by_wallet(wallet_address: str, db: Session = Depends(get_db)):
    """Resolve the company registered for a wallet address."""
    return company_service.get_company_by_wallet(db, wallet_address)


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(company_id: str, db: Session = Depends(get_db)):
    return company_service.get_company(db, company_id)


@router.patch("/{company_id}/schedule", response_model=CompanyResponse)
def update_schedule(company_id: str, update: ScheduleUpdate, db: Session = Depends(get_db)):
    """Change the payment cadence. Unknown cadences are rejected with 422."""
    return company_service.update_payment_schedule(db, company_id, update.payment_schedule)


@router.get("/{company_id}/schedule-state", response_model=ScheduleStateResponse)
def get_schedule_state(
    company_id: str,
    db: Session = Depends(get_db),
    scheduler: PaymentScheduler = Depends(get_scheduler),
):
    """
    Where the company sits in its payment cycle.

    state is one of:
    - due: the next payment date has passed
    - upcoming: the next payment falls within a week
    - scheduled: anything further out
    """
    company = company_service.get_company(db, company_id)
    return ScheduleStateResponse(
        company_id=company.id,
        payment_schedule=company.payment_schedule,
        state=scheduler.get_schedule_state(company.id),
        next_payment_date=scheduler.get_next_payment_date(company.id),
        batch_in_flight=scheduler.is_running_batch(company.id),
    )
