import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from paystream.core.exceptions import NotFoundError
from paystream.models.company import Company
from paystream.repositories.company import CompanyRepository
from paystream.services.due_dates import validate_schedule

logger = logging.getLogger(__name__)


def register_company(db: Session, data: Dict[str, Any]) -> Company:
    """Register a company for the connected wallet. Uniqueness per wallet is not enforced."""
    data = dict(data)
    data["payment_schedule"] = validate_schedule(data.get("payment_schedule"))
    company = CompanyRepository(db).create(data)
    logger.info(f"Registered company {company.id} for wallet {company.wallet_address}")
    return company


def get_company(db: Session, company_id: str) -> Company:
    return CompanyRepository(db).get(company_id)


def get_company_by_wallet(db: Session, wallet_address: str) -> Company:
    company = CompanyRepository(db).by_wallet(wallet_address)
    if company is None:
        raise NotFoundError("Company", wallet_address)
    return company


def search_companies(db: Session, term: str) -> List[Company]:
    repo = CompanyRepository(db)
    return repo.search(term) if term else repo.list()


def update_payment_schedule(db: Session, company_id: str, schedule: str) -> Company:
    schedule = validate_schedule(schedule)
    company = CompanyRepository(db).update(company_id, {"payment_schedule": schedule})
    logger.info(f"Company {company.id} payment schedule set to {schedule}")
    return company
