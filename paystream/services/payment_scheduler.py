"""
Payment Scheduler

Owns the recurring payroll cadence for every active company:

- start()/stop() arm and cancel an hourly due-check on the running event loop
- check_due() runs a batch for each company whose next payment date has passed
- trigger_now() runs a batch immediately, bypassing the due-check
- trigger_bonuses() runs scheduled one-off payments whose date has passed

Both manual triggers refuse an inactive company with CompanyInactiveError.

At most one batch per company is in flight at any time. A trigger for the
same kind of run joins the in-flight batch and receives its report; a
different kind of run waits for it to finish before starting.

Each run works in its own database session taken from the injected factory.
"""

import asyncio
import enum
import logging
from datetime import datetime
from decimal import Decimal
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from paystream.core.clock import Clock, utcnow
from paystream.core.exceptions import AppException, CompanyInactiveError
from paystream.gateway.base import ChainGateway
from paystream.models.company import Company
from paystream.models.payment import Payment, PaymentType
from paystream.repositories.company import CompanyRepository
from paystream.repositories.employee import EmployeeRepository
from paystream.repositories.payment import PaymentRepository
from paystream.schemas.payment_run import BatchReport
from paystream.services import due_dates, payment_service
from paystream.services.payment_executor import BatchPaymentExecutor

logger = logging.getLogger(__name__)

DEFAULT_CHECK_INTERVAL = 60 * 60  # hourly


class SchedulerStatus(str, enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class PaymentScheduler:

    def __init__(
        self,
        session_factory: Callable[[], Session],
        gateway: ChainGateway,
        clock: Clock = utcnow,
        check_interval: float = DEFAULT_CHECK_INTERVAL,
        payment_timeout: float = 30.0,
    ):
        self.session_factory = session_factory
        self.gateway = gateway
        self.clock = clock
        self.check_interval = check_interval
        self.payment_timeout = payment_timeout
        self._status = SchedulerStatus.STOPPED
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: Dict[str, Tuple[str, asyncio.Task]] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def status(self) -> SchedulerStatus:
        return self._status

    def get_status(self) -> str:
        return self._status.value

    def start(self) -> None:
        """Begin checking for due payments; must be called from a running event loop."""
        if self._status == SchedulerStatus.RUNNING:
            return
        self._status = SchedulerStatus.RUNNING
        self._timer = asyncio.get_running_loop().create_task(self._timer_loop())
        logger.info(f"Payment scheduler started (interval {self.check_interval:g}s)")

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._status == SchedulerStatus.RUNNING:
            logger.info("Payment scheduler stopped")
        self._status = SchedulerStatus.STOPPED

    async def _timer_loop(self) -> None:
        while True:
            try:
                await self.check_due()
            except Exception:
                logger.exception("Scheduled due-check failed")
            await asyncio.sleep(self.check_interval)

    # ------------------------------------------------------------------
    # Due-date queries
    # ------------------------------------------------------------------

    def _anchor(self, db: Session, company_id: str) -> Tuple[str, datetime]:
        company = CompanyRepository(db).get(company_id)
        last = PaymentRepository(db).latest_completed_date(company.id)
        return company.payment_schedule, due_dates.cycle_anchor(company.created_at, last)

    def get_next_payment_date(self, company_id: str) -> datetime:
        with self.session_factory() as db:
            schedule, anchor = self._anchor(db, company_id)
        return due_dates.next_due_date(schedule, anchor)

    def is_company_due(self, company_id: str) -> bool:
        with self.session_factory() as db:
            schedule, anchor = self._anchor(db, company_id)
        return due_dates.is_due(self.clock(), schedule, anchor)

    def get_schedule_state(self, company_id: str) -> str:
        with self.session_factory() as db:
            schedule, anchor = self._anchor(db, company_id)
        return due_dates.schedule_state(self.clock(), schedule, anchor)

    def is_running_batch(self, company_id: str) -> bool:
        current = self._in_flight.get(company_id)
        return current is not None and not current[1].done()

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    async def check_due(self) -> List[BatchReport]:
        """Run a batch for every active company whose payment is due."""
        with self.session_factory() as db:
            company_ids = [c.id for c in CompanyRepository(db).active()]

        due = []
        for company_id in company_ids:
            if self.is_running_batch(company_id):
                logger.info(f"Skipping due-check for company {company_id}: batch already in flight")
                continue
            try:
                if self.is_company_due(company_id):
                    due.append(company_id)
            except AppException as e:
                logger.error(f"Due-check failed for company {company_id}: {e.message}")

        if not due:
            return []

        logger.info(f"Scheduled payment time reached for {len(due)} companies")
        outcomes = await asyncio.gather(*(self.trigger_now(cid) for cid in due), return_exceptions=True)
        reports = []
        for company_id, outcome in zip(due, outcomes):
            if isinstance(outcome, BatchReport):
                reports.append(outcome)
            elif isinstance(outcome, Exception):
                logger.error(f"Scheduled batch for company {company_id} failed: {outcome}")
            else:
                raise outcome
        return reports

    async def trigger_now(self, company_id: str) -> BatchReport:
        """Pay every active employee of the company now, regardless of the due date."""
        return await self._single_flight(company_id, PaymentType.MONTHLY.value, self._run_monthly)

    async def trigger_bonuses(self, company_id: str) -> BatchReport:
        """Execute the company's scheduled payments whose date has passed."""
        return await self._single_flight(company_id, PaymentType.BONUS.value, self._run_scheduled)

    async def _single_flight(
        self,
        company_id: str,
        run_type: str,
        runner: Callable[[str], Awaitable[BatchReport]],
    ) -> BatchReport:
        while True:
            current = self._in_flight.get(company_id)
            if current is None or current[1].done():
                break
            current_type, task = current
            if current_type == run_type:
                logger.info(f"Joining in-flight {run_type} batch for company {company_id}")
                return await asyncio.shield(task)
            # Different kind of run: wait for it, ignoring its outcome
            await asyncio.wait({task})

        task = asyncio.get_running_loop().create_task(runner(company_id))
        self._in_flight[company_id] = (run_type, task)
        task.add_done_callback(lambda t, cid=company_id: self._release(cid, t))
        return await asyncio.shield(task)

    def _release(self, company_id: str, task: asyncio.Task) -> None:
        current = self._in_flight.get(company_id)
        if current is not None and current[1] is task:
            del self._in_flight[company_id]

    @staticmethod
    def _active_company(db: Session, company_id: str) -> Company:
        company = CompanyRepository(db).get(company_id)
        if not company.is_active:
            raise CompanyInactiveError(company.id)
        return company

    async def _run_monthly(self, company_id: str) -> BatchReport:
        with self.session_factory() as db:
            company = self._active_company(db, company_id)
            employees = EmployeeRepository(db).active_for_company(company.id)
            executor = BatchPaymentExecutor(db, self.gateway, timeout=self.payment_timeout, clock=self.clock)
            return await executor.run(company, employees)

    async def _run_scheduled(self, company_id: str) -> BatchReport:
        with self.session_factory() as db:
            company = self._active_company(db, company_id)
            payments = PaymentRepository(db).due_scheduled(company.id, self.clock())
            executor = BatchPaymentExecutor(db, self.gateway, timeout=self.payment_timeout, clock=self.clock)
            return await executor.execute_scheduled(company, payments)

    # ------------------------------------------------------------------
    # One-off payments
    # ------------------------------------------------------------------

    def schedule_bonus(self, employee_id: str, amount: Decimal, date: datetime) -> Payment:
        with self.session_factory() as db:
            return payment_service.schedule_bonus(db, employee_id, amount, date)

    def cancel_scheduled_payment(self, payment_id: str) -> Payment:
        with self.session_factory() as db:
            return payment_service.cancel_scheduled_payment(db, payment_id)
