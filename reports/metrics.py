"""
Monthly summary statistics over a daily ledger.

Computes lowest point, totals, ending balance and the "variable budget"
(income minus expenses) for ONE month's ledger. Skipped events carry $0 and
therefore drop out of the totals without special casing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import numpy as np

from core.schema import EXPENSE, INCOME

if TYPE_CHECKING:
    from engine.events import DayRecord


@dataclass(frozen=True)
class MonthStats:
    lowest_balance: float
    lowest_day: int
    total_income: float
    total_expenses: float
    ending_balance: float
    variable_budget: float     # total_income - total_expenses


def stats_for(ledger: Sequence[DayRecord], *, starting_balance: float) -> MonthStats:
    """
    Reduce a month's ledger to its summary.

    Parameters
    ----------
    ledger : sequence of DayRecord
        Output of engine.projection.build_month()
    starting_balance : float
        Reported as the ending balance when the ledger is empty

    The lowest balance is the FIRST day reaching the minimum. An empty ledger
    reports a lowest balance of 0 on day 1.
    """
    total_income = float(sum(e.amount for r in ledger for e in r.events if e.type == INCOME))
    total_expenses = float(sum(e.amount for r in ledger for e in r.events if e.type == EXPENSE))

    if len(ledger) == 0:
        return MonthStats(
            lowest_balance=0.0,
            lowest_day=1,
            total_income=total_income,
            total_expenses=total_expenses,
            ending_balance=float(starting_balance),
            variable_budget=total_income - total_expenses,
        )

    balances = np.array([r.balance for r in ledger], dtype=float)
    i_low = int(np.argmin(balances))   # argmin returns the first minimum

    return MonthStats(
        lowest_balance=float(balances[i_low]),
        lowest_day=ledger[i_low].day,
        total_income=total_income,
        total_expenses=total_expenses,
        ending_balance=float(balances[-1]),
        variable_budget=total_income - total_expenses,
    )
