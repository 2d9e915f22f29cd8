"""
Occurrence generation: every cash-flow instance of one item inside one month.

Order of work for occurrences_in_month(item, year, month):
  1. Overrides moved INTO the month from an original date elsewhere
  2. Dispatch on the item's schedule kind (resolved once when the item was built):
       ONE_TIME     -> the item's date
       CREDIT_CARD  -> payment sized by the amortizer for this month
       SPLIT        -> two fixed sub-payments per month
       WEEKLY/BIWEEKLY, SEMIMONTHLY, BIMONTHLY, MONTHLY -> calendar cadence,
       capped by the payment plan's count when there is one
  3. De-duplicate on (date, split-tagged amount) and sort by day

Quarterly items resolve to MONTHLY and therefore fire every month.
Bad input (missing sub-records, negative counts) yields no occurrences, never an error.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Dict, List, Optional

from core.models import Expense, Item, Occurrence
from core.schema import (
    SEMIMONTHLY_EARLY_SECOND_DAY,
    SEMIMONTHLY_LATE_SECOND_DAY,
    ScheduleKind,
)
from core.utils import (
    clamp_day,
    days_in_month,
    format_naive_date,
    in_month,
    months_between,
    parse_naive_date,
)

from .amortizer import balance_at_month
from .overrides import (
    inbound_occurrences,
    resolve,
    scheduled_occurrences,
    skipped_occurrence,
)


def _within_cap(count: int, cap: Optional[int]) -> bool:
    return cap is None or count <= cap


def _one_time(item: Item, year: int, month: int) -> List[Occurrence]:
    when = item.date or item.start_date
    if not when:
        return []
    return scheduled_occurrences(item, parse_naive_date(when), year, month)


def _stepping(item: Item, year: int, month: int, step_days: int) -> List[Occurrence]:
    start = parse_naive_date(item.anchor_date)
    cap = item.payment_cap
    month_start = date(year, month, 1)
    month_end = date(year, month, days_in_month(year, month))
    step = timedelta(days=step_days)

    # count is the 1-based payment number of `current`
    current, count = start, 1
    while current < month_start and _within_cap(count, cap):
        current += step
        count += 1

    out: List[Occurrence] = []
    while current <= month_end and _within_cap(count, cap):
        if current >= month_start:
            out.extend(scheduled_occurrences(item, current, year, month))
        current += step
        count += 1
    return out


def _weekly(item: Item, year: int, month: int) -> List[Occurrence]:
    return _stepping(item, year, month, 7)


def _biweekly(item: Item, year: int, month: int) -> List[Occurrence]:
    return _stepping(item, year, month, 14)


def _semimonthly(item: Item, year: int, month: int) -> List[Occurrence]:
    start = parse_naive_date(item.anchor_date)
    cap = item.payment_cap
    plan = getattr(item, "payment_plan", None)

    first_day = start.day
    if plan is not None and plan.second_day:
        second_day = plan.second_day
    elif start.day <= SEMIMONTHLY_EARLY_SECOND_DAY:
        second_day = SEMIMONTHLY_EARLY_SECOND_DAY
    else:
        second_day = SEMIMONTHLY_LATE_SECOND_DAY

    # a capped plan counts whole months, two payments each
    offset = months_between(start, year, month)
    if offset < 0 or (cap is not None and offset >= cap):
        return []

    first = clamp_day(year, month, first_day)
    out = scheduled_occurrences(item, first, year, month)
    second = clamp_day(year, month, second_day)
    if second.day > first.day:
        out.extend(scheduled_occurrences(item, second, year, month))
    return out


def _bimonthly(item: Item, year: int, month: int) -> List[Occurrence]:
    start = parse_naive_date(item.anchor_date)
    cap = item.payment_cap
    offset = months_between(start, year, month)
    if offset < 0 or offset % 2 != 0:
        return []
    if cap is not None and offset // 2 >= cap:
        return []
    return scheduled_occurrences(item, clamp_day(year, month, start.day), year, month)


def _monthly(item: Item, year: int, month: int) -> List[Occurrence]:
    start = parse_naive_date(item.anchor_date)
    cap = item.payment_cap
    offset = months_between(start, year, month)
    if offset < 0 or (cap is not None and offset >= cap):
        return []
    return scheduled_occurrences(item, clamp_day(year, month, start.day), year, month)


def _credit_card(item: Expense, year: int, month: int) -> List[Occurrence]:
    start = parse_naive_date(item.anchor_date)
    due = clamp_day(year, month, start.day)
    due_str = format_naive_date(due)
    override = resolve(item.overrides, due_str)

    # a skipped payment shows even when the card is paid off
    if override is not None and override.is_skipped:
        return skipped_occurrence(due, year, month)

    status = balance_at_month(item, year, month)
    if status.is_paid_off or status.payment_this_month <= 0:
        return []
    if months_between(start, year, month) < 0:
        return []

    if override is not None:
        moved = parse_naive_date(override.new_date)
        if not in_month(moved, year, month):
            return []
        amount = override.new_amount if override.new_amount is not None else status.payment_this_month
        return [Occurrence(
            day=moved.day,
            date_str=format_naive_date(moved),
            amount=amount,
            is_override=True,
            original_date=due_str,
        )]

    return [Occurrence(day=due.day, date_str=due_str, amount=status.payment_this_month)]


def _split(item: Expense, year: int, month: int) -> List[Occurrence]:
    cfg = item.split_config
    if cfg is None:
        return []
    start = parse_naive_date(item.anchor_date)
    if months_between(start, year, month) < 0:
        return []

    out: List[Occurrence] = []
    parts = ((1, cfg.first_day, cfg.first_amount), (2, cfg.second_day, cfg.second_amount))
    for part, day, amount in parts:
        when = clamp_day(year, month, day)
        date_str = format_naive_date(when)
        override = resolve(item.overrides, date_str)

        if override is None:
            out.append(Occurrence(
                day=when.day,
                date_str=date_str,
                amount=amount,
                is_split=True,
                split_part=part,
            ))
        elif override.is_skipped:
            out.extend(skipped_occurrence(when, year, month, is_split=True, split_part=part))
        else:
            moved = parse_naive_date(override.new_date)
            if in_month(moved, year, month):
                out.append(Occurrence(
                    day=moved.day,
                    date_str=format_naive_date(moved),
                    amount=override.new_amount if override.new_amount is not None else amount,
                    is_override=True,
                    is_split=True,
                    split_part=part,
                    original_date=date_str,
                ))
    return out


_GENERATORS: Dict[ScheduleKind, Callable[..., List[Occurrence]]] = {
    ScheduleKind.ONE_TIME: _one_time,
    ScheduleKind.CREDIT_CARD: _credit_card,
    ScheduleKind.SPLIT: _split,
    ScheduleKind.WEEKLY: _weekly,
    ScheduleKind.BIWEEKLY: _biweekly,
    ScheduleKind.SEMIMONTHLY: _semimonthly,
    ScheduleKind.BIMONTHLY: _bimonthly,
    ScheduleKind.MONTHLY: _monthly,
}


def dedupe_occurrences(occurrences: List[Occurrence]) -> List[Occurrence]:
    """
    Drop later duplicates and sort by day.

    Plain occurrences collide on date alone; split parts also carry their amount
    so two different parts on one day both survive.
    """
    seen = set()
    out: List[Occurrence] = []
    for occ in occurrences:
        key = (occ.date_str, occ.amount if occ.is_split else None)
        if key in seen:
            continue
        seen.add(key)
        out.append(occ)
    return sorted(out, key=lambda o: o.day)


def occurrences_in_month(item: Item, year: int, month: int) -> List[Occurrence]:
    """All occurrences of `item` landing in (year, month), sorted by day."""
    occurrences = inbound_occurrences(item, year, month)
    if item.schedule is not ScheduleKind.ONE_TIME and not item.anchor_date:
        return dedupe_occurrences(occurrences)
    occurrences.extend(_GENERATORS[item.schedule](item, year, month))
    return dedupe_occurrences(occurrences)
