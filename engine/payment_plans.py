"""
Payment-plan arithmetic used when a finite installment plan is entered or shown.

A semimonthly plan's payment_count counts months, so it pays twice per count.
Month arithmetic clamps to the last valid day (Jan 31 + 1 month = Feb 28/29).
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from core.models import PaymentPlan
from core.schema import (
    PLAN_MAX_SECOND_DAY,
    PLAN_SECOND_DAY_GAP,
    SEMIMONTHLY_EARLY_SECOND_DAY,
    SEMIMONTHLY_LATE_SECOND_DAY,
)
from core.utils import clamp_day, parse_naive_date, round_currency


def payments_per_count(frequency: str) -> int:
    return 2 if frequency == "semimonthly" else 1


def total_payments(plan: PaymentPlan) -> int:
    if not plan.payment_count:
        return 0
    return int(plan.payment_count) * payments_per_count(plan.frequency)


def payment_amount(plan: PaymentPlan) -> float:
    """Per-payment amount that retires total_debt over the plan, rounded to cents."""
    n = total_payments(plan)
    if n <= 0:
        return 0.0
    return round_currency(plan.total_debt / n)


def valid_second_day(first_day: int, second_day: int) -> int:
    """Second semimonthly day, pushed two weeks past the first when not after it."""
    if second_day <= first_day:
        return min(first_day + PLAN_SECOND_DAY_GAP, PLAN_MAX_SECOND_DAY)
    return second_day


def plan_end_date(plan: PaymentPlan, start_date: Union[str, date]) -> Optional[date]:
    """Date of the final payment; None when the plan has no payment count."""
    if not plan.payment_count or not plan.frequency:
        return None
    start = parse_naive_date(start_date)
    steps = int(plan.payment_count) - 1

    if plan.frequency == "weekly":
        return start + timedelta(days=7 * steps)
    if plan.frequency == "biweekly":
        return start + timedelta(days=14 * steps)
    if plan.frequency == "bimonthly":
        return start + relativedelta(months=2 * steps)
    if plan.frequency == "semimonthly":
        # mirrors the generator: the second day only pays when it falls after the first
        last_month = start + relativedelta(months=steps)
        if plan.second_day:
            second_day = plan.second_day
        elif start.day <= SEMIMONTHLY_EARLY_SECOND_DAY:
            second_day = SEMIMONTHLY_EARLY_SECOND_DAY
        else:
            second_day = SEMIMONTHLY_LATE_SECOND_DAY
        first = clamp_day(last_month.year, last_month.month, start.day)
        second = clamp_day(last_month.year, last_month.month, second_day)
        return second if second.day > first.day else first
    return start + relativedelta(months=steps)
