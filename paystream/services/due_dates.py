"""
Payment cadence and due-date computation.

"monthly" is a fixed 30-day interval, not a calendar month; payroll calendars
that need month-aware dates should not rely on it.
"""

import math
from datetime import datetime, timedelta
from typing import Optional

from paystream.core.clock import as_utc
from paystream.core.exceptions import InvalidScheduleError
from paystream.models.company import PaymentSchedule

PAYMENT_INTERVALS = {
    PaymentSchedule.WEEKLY.value: timedelta(days=7),
    PaymentSchedule.BIWEEKLY.value: timedelta(days=14),
    PaymentSchedule.MONTHLY.value: timedelta(days=30),
}

UPCOMING_WINDOW_DAYS = 7

STATE_DUE = "due"
STATE_UPCOMING = "upcoming"
STATE_SCHEDULED = "scheduled"


def payment_interval(schedule: str) -> timedelta:
    key = schedule.value if isinstance(schedule, PaymentSchedule) else schedule
    interval = PAYMENT_INTERVALS.get(key) if isinstance(key, str) else None
    if interval is None:
        raise InvalidScheduleError(schedule)
    return interval


def validate_schedule(schedule: str) -> str:
    payment_interval(schedule)
    return schedule.value if isinstance(schedule, PaymentSchedule) else schedule


def next_due_date(schedule: str, last_completed_payment_date: datetime) -> datetime:
    return as_utc(last_completed_payment_date) + payment_interval(schedule)


def is_due(now: datetime, schedule: str, last_completed_payment_date: datetime) -> bool:
    return as_utc(now) >= next_due_date(schedule, last_completed_payment_date)


def schedule_state(now: datetime, schedule: str, last_completed_payment_date: datetime) -> str:
    """Display status: due now, upcoming within a week, or further out."""
    now = as_utc(now)
    next_due = next_due_date(schedule, last_completed_payment_date)
    if now >= next_due:
        return STATE_DUE
    days_until = math.ceil((next_due - now) / timedelta(days=1))
    if days_until <= UPCOMING_WINDOW_DAYS:
        return STATE_UPCOMING
    return STATE_SCHEDULED


def cycle_anchor(created_at: datetime, last_completed: Optional[datetime]) -> datetime:
    """Date the next cycle is counted from: last completed payment, else company creation."""
    return as_utc(last_completed) if last_completed is not None else as_utc(created_at)
