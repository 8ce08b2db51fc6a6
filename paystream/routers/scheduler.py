"""
Scheduler Router

Controls the recurring payroll timer and exposes manual run triggers.
Start and stop are async so the timer task lands on the server's event loop.
"""

import logging

from fastapi import APIRouter, Depends, Request

from paystream.core.limiter import limiter, RUN_LIMIT
from paystream.dependencies import get_scheduler
from paystream.schemas.payment_run import BatchReport
from paystream.services.payment_scheduler import PaymentScheduler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Scheduler"])


@router.get("/scheduler/status")
def scheduler_status(scheduler: PaymentScheduler = Depends(get_scheduler)):
    return {"status": scheduler.get_status(), "check_interval": scheduler.check_interval}


@router.post("/scheduler/start")
async def start_scheduler(scheduler: PaymentScheduler = Depends(get_scheduler)):
    """Arm the due-check timer. Calling it while running is a no-op."""
    scheduler.start()
    return {"status": scheduler.get_status()}


@router.post("/scheduler/stop")
async def stop_scheduler(scheduler: PaymentScheduler = Depends(get_scheduler)):
    scheduler.stop()
    return {"status": scheduler.get_status()}


@router.post("/companies/{company_id}/run", response_model=BatchReport)
@limiter.limit(RUN_LIMIT)
async def run_payroll(
    request: Request,
    company_id: str,
    scheduler: PaymentScheduler = Depends(get_scheduler),
):
    """
    Pay every active employee of the company now.

    If a payroll batch for the company is already running, the caller receives
    that batch's report instead of starting a second one.
    """
    logger.info(f"Manual payroll run requested for company {company_id}")
    return await scheduler.trigger_now(company_id)


@router.post("/companies/{company_id}/run-bonuses", response_model=BatchReport)
@limiter.limit(RUN_LIMIT)
async def run_bonuses(
    request: Request,
    company_id: str,
    scheduler: PaymentScheduler = Depends(get_scheduler),
):
    """Execute the company's scheduled payments whose date has passed."""
    logger.info(f"Bonus run requested for company {company_id}")
    return await scheduler.trigger_bonuses(company_id)
