"""
Dashboard analytics.

Aggregated numbers behind the dashboard cards and charts: employee counts,
monthly salary budget, department split, and payment success/volume history.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from paystream.core.clock import as_utc
from paystream.gateway.base import ChainGateway
from paystream.models.payment import Payment, PaymentStatus
from paystream.repositories.company import CompanyRepository
from paystream.repositories.employee import EmployeeRepository
from paystream.repositories.payment import PaymentRepository

UNASSIGNED_DEPARTMENT = "Unassigned"


def employee_stats(db: Session, company_id: str) -> Dict[str, Any]:
    employees = EmployeeRepository(db).for_company(company_id)
    active = [e for e in employees if e.is_active]
    return {
        "total_employees": len(employees),
        "active_employees": len(active),
        "monthly_budget": sum((Decimal(e.salary) for e in active), Decimal("0")),
    }


def department_distribution(db: Session, company_id: str) -> Dict[str, int]:
    """Active employee headcount per department."""
    counts: Dict[str, int] = defaultdict(int)
    for employee in EmployeeRepository(db).active_for_company(company_id):
        counts[employee.department or UNASSIGNED_DEPARTMENT] += 1
    return dict(counts)


def success_rating(success_rate: float) -> str:
    if success_rate >= 95:
        return "good"
    if success_rate >= 80:
        return "fair"
    return "poor"


def group_by_month(payments: List[Payment]) -> Dict[str, Decimal]:
    """Completed payment volume keyed by YYYY-MM, in chronological order."""
    grouped: Dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for payment in payments:
        if payment.status != PaymentStatus.COMPLETED.value:
            continue
        month_key = as_utc(payment.payment_date).strftime("%Y-%m")
        grouped[month_key] += Decimal(payment.amount)
    return {key: grouped[key] for key in sorted(grouped)}


def payment_analytics(db: Session, company_id: str) -> Dict[str, Any]:
    # Scheduled and cancelled payments have not been attempted
    payments = [
        p for p in PaymentRepository(db).for_company(company_id)
        if p.status in (PaymentStatus.COMPLETED.value, PaymentStatus.FAILED.value)
    ]
    completed = [p for p in payments if p.status == PaymentStatus.COMPLETED.value]
    failed = [p for p in payments if p.status == PaymentStatus.FAILED.value]
    success_rate = round(len(completed) / len(payments) * 100, 1) if payments else 0.0

    return {
        "total_payments": len(payments),
        "completed": len(completed),
        "failed": len(failed),
        "success_rate": success_rate,
        "rating": success_rating(success_rate) if payments else None,
        "total_volume": sum((Decimal(p.amount) for p in completed), Decimal("0")),
        "monthly_totals": group_by_month(completed),
    }


def company_dashboard(db: Session, company_id: str) -> Dict[str, Any]:
    company = CompanyRepository(db).get(company_id)
    return {
        "company_id": company.id,
        "employees": employee_stats(db, company.id),
        "departments": department_distribution(db, company.id),
        "payments": payment_analytics(db, company.id),
        "recent_payments": PaymentRepository(db).for_company(company.id, limit=10),
    }


async def wallet_overview(gateway: ChainGateway) -> Dict[str, Any]:
    account = await gateway.get_account()
    if not account:
        return {"connected": False, "account": None, "network": None, "balance": None}
    return {
        "connected": True,
        "account": account,
        "network": await gateway.get_network(),
        "balance": await gateway.get_balance(account),
    }
