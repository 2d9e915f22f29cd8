"""
Tabular views over projection output: per-event ledger frames, multi-month
outlook frames, and expense grouping for display.

The outlook answers the questions a monthly view cannot:
  Q1: "Does the balance trend up or down?"   -> ending balance per month
  Q2: "When is the tightest month?"          -> lowest balance across the range
  Q3: "How often do I dip below my floor?"   -> months below the floor threshold
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Sequence, Tuple

import numpy as np
import pandas as pd

from core.models import AccountState, Expense
from core.schema import EXPENSE_CATEGORIES
from core.utils import month_key, require_columns, round_currency

from .metrics import MonthStats

if TYPE_CHECKING:
    from engine.events import DayRecord

LEDGER_COLUMNS = [
    "date", "day", "type", "name", "amount", "signed_amount", "id", "category",
    "is_override", "is_skipped", "is_split", "split_part", "original_date",
    "day_change", "balance",
]

OUTLOOK_COLUMNS = [
    "month", "start_balance", "total_income", "total_expenses",
    "lowest_balance", "lowest_day", "ending_balance",
]


def ledger_to_frame(ledger: Sequence[DayRecord], year: int, month: int) -> pd.DataFrame:
    """
    Flatten a month's ledger to one row per event.

    Days without events are left out; day_change and balance repeat the values
    of the event's day.
    """
    rows = []
    for record in ledger:
        for e in record.events:
            rows.append({
                "date": f"{month_key(year, month)}-{record.day:02d}",
                "day": record.day,
                "type": e.type,
                "name": e.name,
                "amount": e.amount,
                "signed_amount": e.signed_amount,
                "id": e.id,
                "category": e.category,
                "is_override": e.is_override,
                "is_skipped": e.is_skipped,
                "is_split": e.is_split,
                "split_part": e.split_part,
                "original_date": e.original_date,
                "day_change": record.change,
                "balance": record.balance,
            })
    return pd.DataFrame(rows, columns=LEDGER_COLUMNS)


def outlook_frame(months: Iterable[Tuple[Tuple[int, int], float, MonthStats]]) -> pd.DataFrame:
    """
    One row per month from (year_month, opening_balance, stats) triples.

    Money columns are rounded to cents for display.
    """
    rows = []
    for (year, month), opening, stats in months:
        rows.append({
            "month": month_key(year, month),
            "start_balance": opening,
            "total_income": stats.total_income,
            "total_expenses": stats.total_expenses,
            "lowest_balance": stats.lowest_balance,
            "lowest_day": stats.lowest_day,
            "ending_balance": stats.ending_balance,
        })
    df = pd.DataFrame(rows, columns=OUTLOOK_COLUMNS)
    money = ["start_balance", "total_income", "total_expenses", "lowest_balance", "ending_balance"]
    if len(df):
        df[money] = round_currency(df[money].to_numpy(dtype=float))
    return df


def summarize_outlook(outlook: pd.DataFrame, account: AccountState) -> Dict[str, object]:
    """
    Range-level figures from an outlook frame.

    Returns
    -------
    Dict with:
      "lowest_balance", "lowest_month":  tightest point across the range
      "months_below_floor", "months_below_warning": counts of months dipping under each threshold
      "net_change":  ending balance of the last month minus start balance of the first
      "total_income", "total_expenses"
    """
    require_columns(outlook, OUTLOOK_COLUMNS)
    if len(outlook) == 0:
        raise ValueError("No outlook months to summarize.")

    lows = outlook["lowest_balance"].to_numpy(dtype=float)
    i_low = int(np.argmin(lows))
    return {
        "lowest_balance": float(lows[i_low]),
        "lowest_month": str(outlook["month"].iloc[i_low]),
        "months_below_floor": int(np.sum(lows < account.floor_threshold)),
        "months_below_warning": int(np.sum(lows < account.warning_threshold)),
        "net_change": float(outlook["ending_balance"].iloc[-1] - outlook["start_balance"].iloc[0]),
        "total_income": float(outlook["total_income"].sum()),
        "total_expenses": float(outlook["total_expenses"].sum()),
    }


def group_expenses_by_category(expenses: Iterable[Expense]) -> Dict[str, List[Expense]]:
    """Every known category in display order; unknown categories land in "other"."""
    groups: Dict[str, List[Expense]] = {cat: [] for cat in EXPENSE_CATEGORIES}
    for expense in expenses:
        groups.get(expense.category, groups["other"]).append(expense)
    return groups
