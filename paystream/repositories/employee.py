from typing import List

from paystream.models.employee import Employee
from paystream.repositories.base import Repository


class EmployeeRepository(Repository[Employee]):
    model = Employee
    resource_type = "Employee"

    def for_company(self, company_id: str, active_only: bool = False) -> List[Employee]:
        query = self.db.query(Employee).filter(Employee.company_id == company_id)
        if active_only:
            query = query.filter(Employee.is_active == True)  # noqa: E712
        return query.order_by(Employee.name.asc()).all()

    def active_for_company(self, company_id: str) -> List[Employee]:
        return self.for_company(company_id, active_only=True)
