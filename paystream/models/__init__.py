# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import company, employee, payment

# Explicit class exports for cleaner imports
from .company import Company, PaymentSchedule
from .employee import Employee
from .payment import Payment, PaymentStatus, PaymentType

__all__ = [
    "Company",
    "PaymentSchedule",
    "Employee",
    "Payment",
    "PaymentStatus",
    "PaymentType",
]
