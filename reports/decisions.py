"""
Balance alerts: turn a month's summary into something the account owner can act on.

  danger:  the month dips below the floor threshold (an overdraft is likely)
  warning: the month dips below the warning threshold
  safe:    neither

Only the most severe alert is raised for a month.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import pandas as pd

from core.models import AccountState
from core.utils import format_currency

from .metrics import MonthStats

SAFE = "safe"
WARNING = "warning"
DANGER = "danger"


@dataclass(frozen=True)
class BalanceAlert:
    type: str          # "warning" | "danger"
    title: str
    text: str


def balance_status(balance: float, account: AccountState) -> str:
    if balance < account.floor_threshold:
        return DANGER
    if balance < account.warning_threshold:
        return WARNING
    return SAFE


def balance_alerts(stats: MonthStats, account: AccountState) -> List[BalanceAlert]:
    """Alert for the month's lowest point, or an empty list when it stays safe."""
    status = balance_status(stats.lowest_balance, account)
    text = f"Balance drops to {format_currency(stats.lowest_balance)} on day {stats.lowest_day}"
    if status == DANGER:
        return [BalanceAlert(type=DANGER, title="Critical Balance Alert", text=text)]
    if status == WARNING:
        return [BalanceAlert(type=WARNING, title="Low Balance Warning", text=text)]
    return []


def alerts_to_dataframe(alerts: List[BalanceAlert]) -> pd.DataFrame:
    """Display-friendly table of alerts."""
    return pd.DataFrame(
        [{"Type": a.type, "Title": a.title, "Detail": a.text} for a in alerts],
        columns=["Type", "Title", "Detail"],
    )
