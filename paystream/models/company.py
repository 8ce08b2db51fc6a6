from sqlalchemy import Column, String, Numeric, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from paystream.database import Base
from paystream.models.ids import generate_id
import enum

class PaymentSchedule(str, enum.Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"

class Company(Base):
    __tablename__ = "companies"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, index=True, nullable=False)
    email = Column(String, nullable=False)
    wallet_address = Column(String, index=True, nullable=False)
    # Stored as plain text so an unknown cadence surfaces as InvalidScheduleError at due-check time
    payment_schedule = Column(String, nullable=False, default=PaymentSchedule.MONTHLY.value)
    monthly_budget = Column(Numeric(18, 2), default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    employees = relationship("Employee", back_populates="company", cascade="all, delete-orphan")
