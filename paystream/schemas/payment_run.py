from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field


class PaymentResult(BaseModel):
    employee_id: Optional[str] = None
    payment_id: Optional[str] = None
    status: str
    amount: Decimal = Decimal("0")
    tx_hash: Optional[str] = None
    error_message: Optional[str] = None


class BatchReport(BaseModel):
    """Aggregate outcome of one batch run across a company's employees."""
    company_id: str
    run_type: str = "monthly"
    started_at: datetime
    finished_at: Optional[datetime] = None
    results: List[PaymentResult] = Field(default_factory=list)

    @computed_field
    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.status == "completed")

    @computed_field
    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if r.status != "completed")

    @computed_field
    @property
    def total_paid(self) -> Decimal:
        return sum((r.amount for r in self.results if r.status == "completed"), Decimal("0"))

    @computed_field
    @property
    def message(self) -> str:
        if not self.results:
            return "No payments to process"
        if self.failure_count == 0:
            return f"All {self.success_count} payments processed successfully!"
        return f"{self.success_count} payments successful, {self.failure_count} failed"
