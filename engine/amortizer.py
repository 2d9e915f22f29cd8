"""
Credit-card amortization with monthly compounding on a revolving balance.

Two separate questions are answered here:
  1. balance_at_month():  what does the card owe, and what is due, in month M?
     Simulated forward from the recorded snapshot (currentBalance as of
     balanceAsOfDate). Months before the snapshot are never simulated backwards.
  2. project_payoff():    how long until a balance is gone at a fixed payment?
     Capped at 360 months so a payment that never covers interest terminates.

Users recalibrate by replacing currentBalance/balanceAsOfDate from a real
statement; payment history before the snapshot is then irrelevant.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.config import DEFAULT_CONFIG, ProjectionConfig
from core.models import Expense
from core.utils import (
    add_months,
    clamp_day,
    format_naive_date,
    iter_months,
    parse_naive_date,
)

from .overrides import resolve

logger = logging.getLogger(__name__)

# balances below this are treated as settled
_SETTLED = 1e-9


@dataclass(frozen=True)
class CardMonthStatus:
    """
    Card state for one target month.

    remaining_balance includes the target month's interest but not its payment;
    payment_this_month is what falls due. The two differ by one payment until
    the next month is queried.
    """
    remaining_balance: float
    is_paid_off: bool
    payment_this_month: float


@dataclass(frozen=True)
class PayoffProjection:
    """months == -1 means the payment never retires the balance."""
    months: int
    total_paid: float
    total_interest: float
    last_payment: float

    @property
    def never_pays_off(self) -> bool:
        return self.months < 0


@dataclass(frozen=True)
class CreditCardStatus:
    remaining: float
    is_paid_off: bool
    months_remaining: int
    payoff_date: Optional[date]


@dataclass(frozen=True)
class PaymentChangeImpact:
    regular: PayoffProjection
    adjusted: PayoffProjection
    months_saved: int
    interest_saved: float


def _due_date_str(expense: Expense, year: int, month: int) -> str:
    start = parse_naive_date(expense.anchor_date)
    return format_naive_date(clamp_day(year, month, start.day))


def _banked_payment(expense: Expense, year: int, month: int, target: tuple) -> float:
    """
    Payment that counts toward history for (year, month).

    An override only changes history once its effective date is before the
    target month; a payment moved to the target month or later is not banked yet.
    """
    override = resolve(expense.overrides, _due_date_str(expense, year, month))
    if override is None:
        return expense.amount
    if override.is_skipped:
        return 0.0
    moved = parse_naive_date(override.new_date)
    if (moved.year, moved.month) < target:
        return override.new_amount if override.new_amount is not None else expense.amount
    return 0.0


def balance_at_month(expense: Expense, year: int, month: int) -> CardMonthStatus:
    """
    Simulate the card from its snapshot month up to (year, month).

    Each month from the snapshot month up to, but not including, the target
    accrues interest and then subtracts that month's payment, once payments
    have started. The target month then accrues one more month of interest to
    size its payment (skip => 0, explicit amount => min(amount, balance),
    otherwise min(regular payment, balance)). When the target is the snapshot
    month itself the snapshot balance is returned unmodified.
    """
    cc = expense.credit_card
    if cc is None:
        return CardMonthStatus(remaining_balance=0.0, is_paid_off=True, payment_this_month=0.0)

    if not expense.anchor_date:
        # no due date, so nothing is ever paid or accrued
        balance = float(cc.current_balance)
        return CardMonthStatus(
            remaining_balance=max(0.0, balance),
            is_paid_off=balance <= _SETTLED,
            payment_this_month=0.0,
        )

    rate = cc.monthly_rate
    as_of = parse_naive_date(cc.balance_as_of_date)
    start = parse_naive_date(expense.anchor_date)
    snapshot_month = (as_of.year, as_of.month)
    first_payment_month = (start.year, start.month)
    target = (year, month)

    balance = float(cc.current_balance)

    if target < snapshot_month:
        return CardMonthStatus(remaining_balance=balance, is_paid_off=False, payment_this_month=0.0)

    for cur in iter_months(snapshot_month, target):
        if balance <= _SETTLED:
            balance = 0.0
            break
        if cur < first_payment_month:
            continue
        balance += balance * rate
        balance -= _banked_payment(expense, cur[0], cur[1], target)
        balance = max(balance, 0.0)

    remaining = balance
    payment_this_month = 0.0
    if balance > _SETTLED and target >= first_payment_month:
        accrued = balance + balance * rate
        if target != snapshot_month:
            remaining = accrued

        override = resolve(expense.overrides, _due_date_str(expense, year, month))
        if override is not None and override.is_skipped:
            payment_this_month = 0.0
        elif override is not None and override.new_amount is not None:
            payment_this_month = min(override.new_amount, accrued)
        else:
            payment_this_month = min(expense.amount, accrued)

    return CardMonthStatus(
        remaining_balance=max(0.0, remaining),
        is_paid_off=balance <= _SETTLED,
        payment_this_month=payment_this_month,
    )


def project_payoff(
    balance: float,
    payment: float,
    apr: float,
    *,
    max_months: int = DEFAULT_CONFIG.payoff_max_months,
) -> PayoffProjection:
    """
    Months (and cost) to retire `balance` paying `payment` monthly, interest first.

    A payment at or below the first month's interest, or a balance still open
    after max_months, is reported as months = -1 rather than raised.
    """
    if balance <= 0:
        return PayoffProjection(months=0, total_paid=0.0, total_interest=0.0, last_payment=0.0)

    never = PayoffProjection(months=-1, total_paid=0.0, total_interest=0.0, last_payment=0.0)
    if payment <= 0:
        return never

    rate = (apr or 0.0) / 100.0 / 12.0
    if rate > 0 and payment <= balance * rate:
        return never

    remaining = float(balance)
    months = 0
    total_paid = 0.0
    total_interest = 0.0
    last_payment = 0.0
    while remaining > _SETTLED and months < max_months:
        interest = remaining * rate
        total_interest += interest
        due = remaining + interest
        last_payment = min(payment, due)
        total_paid += last_payment
        remaining = due - last_payment
        months += 1

    if remaining > _SETTLED:
        logger.debug("Balance %.2f not retired within %d months at %.2f/month", balance, max_months, payment)
        return never

    return PayoffProjection(
        months=months,
        total_paid=total_paid,
        total_interest=total_interest,
        last_payment=last_payment,
    )


def credit_card_status(
    expense: Expense,
    year: int,
    month: int,
    *,
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> CreditCardStatus:
    """
    Remaining debt for (year, month) plus months to payoff at the regular payment.

    payoff_date is the first of the month after the final payment; a payment
    that never retires the debt gives months_remaining = -1 and no date.
    """
    if expense.credit_card is None:
        return CreditCardStatus(remaining=0.0, is_paid_off=True, months_remaining=0, payoff_date=None)

    status = balance_at_month(expense, year, month)
    remaining = max(0.0, status.remaining_balance)
    if status.is_paid_off or remaining <= 0:
        return CreditCardStatus(
            remaining=remaining,
            is_paid_off=status.is_paid_off,
            months_remaining=0,
            payoff_date=None,
        )

    payoff = project_payoff(
        remaining,
        expense.amount,
        expense.credit_card.apr,
        max_months=config.payoff_max_months,
    )
    if payoff.never_pays_off:
        return CreditCardStatus(remaining=remaining, is_paid_off=False, months_remaining=-1, payoff_date=None)

    pay_year, pay_month = add_months(year, month, payoff.months)
    return CreditCardStatus(
        remaining=remaining,
        is_paid_off=False,
        months_remaining=payoff.months,
        payoff_date=date(pay_year, pay_month, 1),
    )


def payment_change_impact(
    balance: float,
    regular_payment: float,
    adjusted_payment: float,
    apr: float,
    *,
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> PaymentChangeImpact:
    """
    Effect of paying `adjusted_payment` once instead of the regular amount.

    The difference comes straight off the balance; the rest of the schedule
    keeps the regular payment.
    """
    regular = project_payoff(balance, regular_payment, apr, max_months=config.payoff_max_months)
    adjusted_balance = max(0.0, balance - (adjusted_payment - regular_payment))
    adjusted = project_payoff(adjusted_balance, regular_payment, apr, max_months=config.payoff_max_months)
    return PaymentChangeImpact(
        regular=regular,
        adjusted=adjusted,
        months_saved=regular.months - adjusted.months,
        interest_saved=regular.total_interest - adjusted.total_interest,
    )
