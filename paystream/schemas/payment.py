from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal


class BonusCreate(BaseModel):
    employee_id: str
    amount: Decimal = Field(..., gt=0)
    payment_date: datetime


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    company_id: str
    employee_id: Optional[str] = None
    amount: Decimal
    payment_date: datetime
    status: str
    payment_type: str
    transaction_hash: Optional[str] = None
    error_message: Optional[str] = None
