from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal


class EmployeeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    wallet_address: str = Field(..., min_length=3, max_length=128)
    position: Optional[str] = None
    department: Optional[str] = None
    salary: Decimal = Field(..., gt=0)


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeResponse(EmployeeBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    company_id: str
    is_active: bool
    join_date: Optional[datetime] = None
