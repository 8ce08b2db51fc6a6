from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal

from paystream.models.company import PaymentSchedule


class CompanyBase(BaseModel):
    """Base schema for company data."""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    wallet_address: str = Field(..., min_length=3, max_length=128)
    payment_schedule: PaymentSchedule = PaymentSchedule.MONTHLY
    monthly_budget: Decimal = Field(default=Decimal("0"), ge=0)


class CompanyCreate(CompanyBase):
    """Schema for registering a company."""
    pass


class ScheduleUpdate(BaseModel):
    # Plain string so unknown cadences reach the InvalidScheduleError path
    payment_schedule: str


class CompanyResponse(CompanyBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    payment_schedule: str
    is_active: bool
    created_at: Optional[datetime] = None


class ScheduleStateResponse(BaseModel):
    company_id: str
    payment_schedule: str
    state: str
    next_payment_date: datetime
    batch_in_flight: bool
