from .base import Repository
from .company import CompanyRepository
from .employee import EmployeeRepository
from .payment import PaymentRepository

__all__ = [
    "Repository",
    "CompanyRepository",
    "EmployeeRepository",
    "PaymentRepository",
]
