"""
Batch Payment Executor

Fans out one gateway payment per employee, waits for every attempt to
settle, and folds the outcomes into a BatchReport. A failure for one
employee is recorded on that employee's Payment and never aborts the batch.

Every attempt writes exactly one Payment record; retries belong to a later run.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from paystream.core.clock import Clock, utcnow
from paystream.core.exceptions import AppException
from paystream.gateway.base import ChainGateway
from paystream.models.company import Company
from paystream.models.employee import Employee
from paystream.models.payment import Payment, PaymentStatus, PaymentType
from paystream.repositories.employee import EmployeeRepository
from paystream.repositories.payment import PaymentRepository
from paystream.schemas.payment_run import BatchReport, PaymentResult

logger = logging.getLogger(__name__)


class BatchPaymentExecutor:

    def __init__(
        self,
        db: Session,
        gateway: ChainGateway,
        timeout: float = 30.0,
        clock: Clock = utcnow,
    ):
        self.payments = PaymentRepository(db)
        self.employees = EmployeeRepository(db)
        self.gateway = gateway
        self.timeout = timeout
        self.clock = clock

    async def _submit(self, to_address: str, amount: Decimal) -> str:
        """Gateway call bounded by the per-payment timeout. Raises on any failure."""
        try:
            return await asyncio.wait_for(
                self.gateway.submit_payment(to_address, amount),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise TimeoutError(f"Payment timed out after {self.timeout:g}s") from e

    async def _settle(self, payment: Payment, to_address: str) -> PaymentResult:
        amount = Decimal(payment.amount)
        try:
            tx_hash = await self._submit(to_address, amount)
        except AppException as e:
            error_message = e.message
        except TimeoutError as e:
            error_message = str(e)
        except Exception as e:
            logger.exception(f"Unexpected gateway error for payment {payment.id}")
            error_message = str(e) or e.__class__.__name__
        else:
            try:
                self.payments.mark_completed(payment.id, tx_hash)
            except AppException as e:
                # Money has moved; the row stays pending until reconciled by hash
                logger.error(
                    f"Payment {payment.id} settled on chain as {tx_hash} but could not be recorded: {e.message}",
                    extra={"payment_id": payment.id, "tx_hash": tx_hash},
                )
                return PaymentResult(
                    employee_id=payment.employee_id,
                    payment_id=payment.id,
                    status=PaymentStatus.FAILED.value,
                    amount=amount,
                    tx_hash=tx_hash,
                    error_message=f"Settled on chain but not recorded: {e.message}",
                )
            return PaymentResult(
                employee_id=payment.employee_id,
                payment_id=payment.id,
                status=PaymentStatus.COMPLETED.value,
                amount=amount,
                tx_hash=tx_hash,
            )

        logger.warning(f"Payment {payment.id} failed: {error_message}")
        self.payments.mark_failed(payment.id, error_message)
        return PaymentResult(
            employee_id=payment.employee_id,
            payment_id=payment.id,
            status=PaymentStatus.FAILED.value,
            amount=amount,
            error_message=error_message,
        )

    async def _pay_employee(self, company: Company, employee: Employee) -> PaymentResult:
        payment = self.payments.create({
            "company_id": company.id,
            "employee_id": employee.id,
            "amount": employee.salary,
            "payment_date": self.clock(),
            "status": PaymentStatus.PENDING.value,
            "payment_type": PaymentType.MONTHLY.value,
        })
        return await self._settle(payment, employee.wallet_address)

    async def _pay_scheduled(self, payment: Payment) -> PaymentResult:
        employee = self.employees.find(payment.employee_id) if payment.employee_id else None
        if employee is None or not employee.is_active:
            error_message = "Employee not found or inactive"
            self.payments.mark_failed(payment.id, error_message)
            return PaymentResult(
                employee_id=payment.employee_id,
                payment_id=payment.id,
                status=PaymentStatus.FAILED.value,
                amount=Decimal(payment.amount),
                error_message=error_message,
            )
        return await self._settle(payment, employee.wallet_address)

    def _collect(self, keys: List[Optional[str]], outcomes: list, amounts: List[Decimal]) -> List[PaymentResult]:
        results = []
        for key, outcome, amount in zip(keys, outcomes, amounts):
            if isinstance(outcome, PaymentResult):
                results.append(outcome)
            elif isinstance(outcome, Exception):
                # Store failure before or after the gateway call; nothing else to record
                logger.error(f"Payment attempt for employee {key} could not be recorded: {outcome}")
                results.append(PaymentResult(
                    employee_id=key,
                    status=PaymentStatus.FAILED.value,
                    amount=amount,
                    error_message=str(outcome),
                ))
            else:
                raise outcome
        return results

    async def run(self, company: Company, employees: Iterable[Employee]) -> BatchReport:
        """Pay every given employee of *company* once, concurrently."""
        employees = list(employees)
        report = BatchReport(company_id=company.id, run_type=PaymentType.MONTHLY.value, started_at=self.clock())
        logger.info(f"Starting payroll batch for company {company.id} ({len(employees)} employees)")

        outcomes = await asyncio.gather(
            *(self._pay_employee(company, e) for e in employees),
            return_exceptions=True,
        )
        report.results = self._collect(
            [e.id for e in employees], outcomes, [Decimal(e.salary) for e in employees]
        )
        report.finished_at = self.clock()
        logger.info(
            f"Payroll batch for company {company.id} finished: {report.message}",
            extra={"success_count": report.success_count, "failure_count": report.failure_count},
        )
        return report

    async def execute_scheduled(self, company: Company, payments: Iterable[Payment]) -> BatchReport:
        """Run already-scheduled payments (bonuses) whose date has passed."""
        payments = list(payments)
        report = BatchReport(company_id=company.id, run_type=PaymentType.BONUS.value, started_at=self.clock())
        logger.info(f"Executing {len(payments)} scheduled payments for company {company.id}")

        outcomes = await asyncio.gather(
            *(self._pay_scheduled(p) for p in payments),
            return_exceptions=True,
        )
        report.results = self._collect(
            [p.employee_id for p in payments], outcomes, [Decimal(p.amount) for p in payments]
        )
        report.finished_at = self.clock()
        logger.info(f"Scheduled payments for company {company.id} finished: {report.message}")
        return report
