"""
Query facade — every read the presentation layer makes, parameterized by a snapshot.

There is no session state: a CashFlowEngine wraps one immutable snapshot and
every query is a pure function of (snapshot, period). After an edit, build a
new engine over the new snapshot; nothing is cached between queries.

  project_month(y, m)           -> daily ledger
  stats_for(ledger)             -> MonthStats
  todays_balance(today)         -> balance at the end of today
  credit_card_status(id, y, m)  -> remaining debt and payoff estimate
  project_range(y, m, months)   -> multi-month outlook DataFrame
  alerts(y, m)                  -> balance alerts for the month
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence, Union

import pandas as pd

from core.config import DEFAULT_CONFIG, ProjectionConfig
from core.models import AccountState, CashFlowSnapshot, Expense, Item
from reports.aggregator import outlook_frame
from reports.decisions import BalanceAlert, balance_alerts
from reports.metrics import MonthStats, stats_for

from .amortizer import CreditCardStatus, credit_card_status
from .events import DayRecord
from .projection import balance_on, build_month, project_months

logger = logging.getLogger(__name__)


def project_range(
    account: AccountState,
    items: Sequence[Item],
    start_year: int,
    start_month: int,
    months: int,
) -> pd.DataFrame:
    """
    Multi-month outlook starting at (start_year, start_month).

    Returns
    -------
    DataFrame with one row per month:
        month, start_balance, total_income, total_expenses, lowest_balance,
        lowest_day, ending_balance
    """
    rows = []
    for ym, opening, ledger in project_months(account, items, start_year, start_month, months):
        rows.append((ym, opening, stats_for(ledger, starting_balance=opening)))
    logger.debug("Outlook from %04d-%02d over %d month(s)", start_year, start_month, len(rows))
    return outlook_frame(rows)


class CashFlowEngine:
    """Read-only queries over one snapshot."""

    def __init__(self, snapshot: CashFlowSnapshot, config: ProjectionConfig = DEFAULT_CONFIG):
        self.snapshot = snapshot
        self.config = config

    @property
    def account(self) -> AccountState:
        return self.snapshot.account

    @property
    def items(self):
        return self.snapshot.items

    def project_month(self, year: int, month: int) -> List[DayRecord]:
        return build_month(self.account, self.items, year, month)

    def stats_for(self, ledger: Sequence[DayRecord]) -> MonthStats:
        return stats_for(ledger, starting_balance=self.account.starting_balance)

    def month_stats(self, year: int, month: int) -> MonthStats:
        return self.stats_for(self.project_month(year, month))

    def todays_balance(self, today: Optional[Union[str, date]] = None) -> float:
        return balance_on(self.account, self.items, today or date.today())

    def credit_card_status(self, expense_id: str, year: int, month: int) -> CreditCardStatus:
        """
        Remaining debt and payoff estimate for one card.

        Raises KeyError for an unknown id. An expense without card details
        reports as paid off.
        """
        expense = self.snapshot.find_item(expense_id)
        if not isinstance(expense, Expense):
            raise KeyError(f"Not an expense: {expense_id!r}")
        return credit_card_status(expense, year, month, config=self.config)

    def project_range(self, start_year: int, start_month: int, months: int) -> pd.DataFrame:
        return project_range(self.account, self.items, start_year, start_month, months)

    def outlook(self, start_year: int, start_month: int, horizon: str = "1y") -> pd.DataFrame:
        """Outlook over a named horizon ("6m", "1y", "2y", "5y", "10y", "15y")."""
        return self.project_range(start_year, start_month, self.config.horizon_months(horizon))

    def alerts(self, year: int, month: int) -> List[BalanceAlert]:
        return balance_alerts(self.month_stats(year, month), self.account)
