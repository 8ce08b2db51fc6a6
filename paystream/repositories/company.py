from typing import List, Optional

from sqlalchemy import func

from paystream.models.company import Company
from paystream.repositories.base import Repository


class CompanyRepository(Repository[Company]):
    model = Company
    resource_type = "Company"

    def by_wallet(self, wallet_address: str) -> Optional[Company]:
        """First company registered to *wallet_address* (addresses compare case-insensitively)."""
        return self.db.query(Company).filter(
            func.lower(Company.wallet_address) == wallet_address.lower()
        ).order_by(Company.created_at.asc()).first()

    def active(self) -> List[Company]:
        return self.db.query(Company).filter(Company.is_active == True).all()  # noqa: E712
