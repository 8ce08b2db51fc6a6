import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from paystream.models.employee import Employee
from paystream.models.payment import Payment
from paystream.repositories.company import CompanyRepository
from paystream.repositories.employee import EmployeeRepository

logger = logging.getLogger(__name__)


def add_employee(db: Session, company_id: str, data: Dict[str, Any]) -> Employee:
    company = CompanyRepository(db).get(company_id)
    employee = EmployeeRepository(db).create({**data, "company_id": company.id})
    logger.info(f"Added employee {employee.id} to company {company.id}")
    return employee


def list_employees(db: Session, company_id: str, active_only: bool = False) -> List[Employee]:
    CompanyRepository(db).get(company_id)
    return EmployeeRepository(db).for_company(company_id, active_only=active_only)


def toggle_employee_status(db: Session, employee_id: str) -> Employee:
    repo = EmployeeRepository(db)
    employee = repo.get(employee_id)
    employee = repo.update(employee_id, {"is_active": not employee.is_active})
    logger.info(f"Employee {employee.id} {'activated' if employee.is_active else 'deactivated'}")
    return employee


def remove_employee(db: Session, employee_id: str) -> bool:
    """Hard delete. Past payments keep their amounts but lose the employee link."""
    repo = EmployeeRepository(db)
    repo.get(employee_id)
    db.query(Payment).filter(Payment.employee_id == employee_id).update(
        {Payment.employee_id: None}, synchronize_session=False
    )
    repo.delete(employee_id)
    logger.info(f"Removed employee {employee_id}")
    return True
