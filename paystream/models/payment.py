from sqlalchemy import Column, String, Numeric, DateTime, Text, ForeignKey
from sqlalchemy.sql import func
from paystream.database import Base
from paystream.models.ids import generate_id
import enum

class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"

class PaymentType(str, enum.Enum):
    MONTHLY = "monthly"
    BONUS = "bonus"

# Terminal states have no entry here
ALLOWED_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    PaymentStatus.SCHEDULED: {PaymentStatus.COMPLETED, PaymentStatus.FAILED, PaymentStatus.CANCELLED},
}

TERMINAL_STATUSES = {PaymentStatus.COMPLETED, PaymentStatus.FAILED, PaymentStatus.CANCELLED}


def can_transition(current: str, requested: str) -> bool:
    return PaymentStatus(requested) in ALLOWED_TRANSITIONS.get(PaymentStatus(current), set())


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String, primary_key=True, default=generate_id)
    company_id = Column(String, ForeignKey("companies.id"), index=True, nullable=False)
    employee_id = Column(String, ForeignKey("employees.id", ondelete="SET NULL"), index=True, nullable=True)
    amount = Column(Numeric(18, 2), nullable=False)
    payment_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(String, default=PaymentStatus.PENDING.value, index=True)
    payment_type = Column(String, default=PaymentType.MONTHLY.value)
    transaction_hash = Column(String, nullable=True)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
