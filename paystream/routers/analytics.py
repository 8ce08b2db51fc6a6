from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from paystream.core.config import settings
from paystream.database import get_db
from paystream.dependencies import get_gateway
from paystream.gateway.base import ChainGateway
from paystream.schemas.analytics import DashboardResponse, WalletOverview
from paystream.services import analytics_service

router = APIRouter(tags=["Analytics"])


@router.get("/companies/{company_id}/analytics", response_model=DashboardResponse)
def company_analytics(company_id: str, db: Session = Depends(get_db)):
    """Dashboard figures: headcount, salary budget, departments and payment history."""
    dashboard = analytics_service.company_dashboard(db, company_id)
    dashboard["token_symbol"] = settings.token_symbol
    return dashboard


@router.get("/wallet", response_model=WalletOverview)
async def wallet(gateway: ChainGateway = Depends(get_gateway)):
    """Connected account, network name and balance of the payroll wallet."""
    return await analytics_service.wallet_overview(gateway)
