"""
Reports — monthly statistics, tabular outlooks, and balance alerts.
"""

from .metrics import MonthStats, stats_for
from .aggregator import (
    group_expenses_by_category,
    ledger_to_frame,
    outlook_frame,
    summarize_outlook,
)
from .decisions import BalanceAlert, balance_alerts, balance_status

__all__ = [
    "MonthStats",
    "stats_for",
    "group_expenses_by_category",
    "ledger_to_frame",
    "outlook_frame",
    "summarize_outlook",
    "BalanceAlert",
    "balance_alerts",
    "balance_status",
]
