from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from paystream.database import get_db
from paystream.schemas.employee import EmployeeCreate, EmployeeResponse
from paystream.services import employee_service

router = APIRouter(tags=["Employees"])


@router.post("/companies/{company_id}/employees", response_model=EmployeeResponse, status_code=201)
def add_employee(company_id: str, employee_in: EmployeeCreate, db: Session = Depends(get_db)):
    return employee_service.add_employee(db, company_id, employee_in.model_dump())


@router.get("/companies/{company_id}/employees", response_model=List[EmployeeResponse])
def list_employees(
    company_id: str,
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
):
    return employee_service.list_employees(db, company_id, active_only=active_only)


@router.post("/employees/{employee_id}/toggle", response_model=EmployeeResponse)
def toggle_employee(employee_id: str, db: Session = Depends(get_db)):
    """Flip an employee between active and inactive. Inactive employees are skipped by payroll runs."""
    return employee_service.toggle_employee_status(db, employee_id)


@router.delete("/employees/{employee_id}")
def remove_employee(employee_id: str, db: Session = Depends(get_db)):
    employee_service.remove_employee(db, employee_id)
    return {"success": True, "message": "Employee removed"}
