from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel

from paystream.schemas.payment import PaymentResponse


class EmployeeStats(BaseModel):
    total_employees: int
    active_employees: int
    monthly_budget: Decimal


class PaymentAnalytics(BaseModel):
    total_payments: int
    completed: int
    failed: int
    success_rate: float
    rating: Optional[str] = None
    total_volume: Decimal
    monthly_totals: Dict[str, Decimal]


class DashboardResponse(BaseModel):
    company_id: str
    token_symbol: str
    employees: EmployeeStats
    departments: Dict[str, int]
    payments: PaymentAnalytics
    recent_payments: List[PaymentResponse]


class WalletOverview(BaseModel):
    connected: bool
    account: Optional[str] = None
    network: Optional[str] = None
    balance: Optional[Decimal] = None
