"""
Daily projection of the running bank balance for one calendar month.

The opening balance of a month is never cached: it is re-derived by replaying
every month from the account's starting date, because an override saved today
can change any historical month. Cost is O(months x items) per call.

Replay rules:
  - the starting month counts from the starting day (earlier days are ignored)
  - later months count from day 1
  - every occurrence on a day is applied (several per item per day is normal
    for splits); income adds, expenses subtract
  - months before the starting month open at the starting balance
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple, Union

from core.models import AccountState, Item, Occurrence
from core.utils import add_months, days_in_month, iter_months, parse_naive_date

from .events import DayRecord, event_from_occurrence
from .occurrences import occurrences_in_month

logger = logging.getLogger(__name__)

DayBuckets = Dict[int, List[Tuple[Item, Occurrence]]]


def month_occurrences(items: Sequence[Item], year: int, month: int) -> DayBuckets:
    """Occurrences of every item in the month, grouped by day in item order."""
    buckets: DayBuckets = defaultdict(list)
    for item in items:
        for occ in occurrences_in_month(item, year, month):
            buckets[occ.day].append((item, occ))
    return buckets


def _net_change(buckets: DayBuckets, first_day: int, last_day: int) -> float:
    total = 0.0
    for day, entries in buckets.items():
        if first_day <= day <= last_day:
            total += sum(item.sign * occ.amount for item, occ in entries)
    return total


def _first_day(account: AccountState, year: int, month: int) -> int:
    start = parse_naive_date(account.starting_date)
    return start.day if (year, month) == (start.year, start.month) else 1


def balance_at_month_start(
    account: AccountState,
    items: Sequence[Item],
    year: int,
    month: int,
) -> float:
    """Balance before any event of (year, month), replayed from the starting date."""
    start = parse_naive_date(account.starting_date)
    balance = float(account.starting_balance)

    replayed = 0
    for cur in iter_months((start.year, start.month), (year, month)):
        buckets = month_occurrences(items, *cur)
        balance += _net_change(buckets, _first_day(account, *cur), days_in_month(*cur))
        replayed += 1

    logger.debug("Replayed %d month(s) to open %04d-%02d at %.2f", replayed, year, month, balance)
    return balance


def balance_on(
    account: AccountState,
    items: Sequence[Item],
    on_date: Union[str, date],
) -> float:
    """Balance at the end of `on_date`, that day's events included."""
    on = parse_naive_date(on_date)
    start = parse_naive_date(account.starting_date)
    if on < start:
        return float(account.starting_balance)

    balance = balance_at_month_start(account, items, on.year, on.month)
    buckets = month_occurrences(items, on.year, on.month)
    return balance + _net_change(buckets, _first_day(account, on.year, on.month), on.day)


def build_month(
    account: AccountState,
    items: Sequence[Item],
    year: int,
    month: int,
    *,
    opening_balance: Optional[float] = None,
) -> List[DayRecord]:
    """
    Daily ledger for (year, month).

    Parameters
    ----------
    account : AccountState
        Starting balance and date the replay is anchored on
    items : sequence of Item
        Incomes and expenses, in display order
    opening_balance : float, optional
        Balance before the month's first day; replayed from the starting date
        when omitted. Callers walking consecutive months pass the previous
        month's closing balance.

    Returns
    -------
    One DayRecord per day from the first relevant day to month end, with
    balance(day) == balance(day - 1) + change(day).
    """
    if opening_balance is None:
        opening_balance = balance_at_month_start(account, items, year, month)

    buckets = month_occurrences(items, year, month)
    balance = float(opening_balance)
    ledger: List[DayRecord] = []
    for day in range(_first_day(account, year, month), days_in_month(year, month) + 1):
        events = tuple(event_from_occurrence(item, occ) for item, occ in buckets.get(day, ()))
        change = sum((e.signed_amount for e in events), 0.0)
        balance += change
        ledger.append(DayRecord(day=day, events=events, change=change, balance=balance))

    logger.debug(
        "Built %04d-%02d: %d day(s), %d event(s)",
        year, month, len(ledger), sum(len(r.events) for r in ledger),
    )
    return ledger


def project_months(
    account: AccountState,
    items: Sequence[Item],
    start_year: int,
    start_month: int,
    months: int,
) -> List[Tuple[Tuple[int, int], float, List[DayRecord]]]:
    """
    Consecutive monthly ledgers, replaying history only once.

    Returns (year_month, opening_balance, ledger) per month.
    """
    out: List[Tuple[Tuple[int, int], float, List[DayRecord]]] = []
    if months <= 0:
        return out

    start = parse_naive_date(account.starting_date)
    start_month_key = (start.year, start.month)
    opening = balance_at_month_start(account, items, start_year, start_month)
    cur = (start_year, start_month)
    for _ in range(months):
        ledger = build_month(account, items, *cur, opening_balance=opening)
        out.append((cur, opening, ledger))
        cur = add_months(*cur, 1)
        # months up to the starting month all open at the starting balance
        if cur <= start_month_key:
            opening = float(account.starting_balance)
        elif ledger:
            opening = ledger[-1].balance
    return out
