from sqlalchemy import Column, String, Numeric, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from paystream.database import Base
from paystream.models.ids import generate_id

class Employee(Base):
    __tablename__ = "employees"

    id = Column(String, primary_key=True, default=generate_id)
    company_id = Column(String, ForeignKey("companies.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    wallet_address = Column(String, nullable=False)
    position = Column(String, nullable=True)
    department = Column(String, nullable=True, index=True)
    salary = Column(Numeric(18, 2), nullable=False)
    join_date = Column(DateTime(timezone=True), server_default=func.now())
    is_active = Column(Boolean, default=True)

    company = relationship("Company", back_populates="employees")
