"""
Override resolution: per-date exceptions layered over an item's default schedule.

An override is looked up by the date the occurrence would have landed on. When
present it always wins over the schedule:
  - skipped (newDate missing or "SKIPPED"): still emitted, $0, at the original date
  - moved / resized:  emitted at newDate with newAmount (or the default amount)
  - split:            two occurrences, newDate with firstAmount and secondDate
                      with secondAmount; the top-level newAmount is ignored

Because newDate may sit in a different month than originalDate, the generator
also asks for "inbound" occurrences: overrides whose original is elsewhere but
whose resolved date lands in the target month.
"""

from __future__ import annotations

from datetime import date
from typing import List, Mapping, Optional

from core.models import InstanceOverride, Item, Occurrence
from core.utils import format_naive_date, in_month, parse_naive_date


def resolve(
    overrides: Mapping[str, InstanceOverride],
    original_date_str: str,
) -> Optional[InstanceOverride]:
    """Override recorded for an original date, if any."""
    return overrides.get(original_date_str)


def skipped_occurrence(
    original: date,
    year: int,
    month: int,
    *,
    is_split: bool = False,
    split_part: Optional[int] = None,
) -> List[Occurrence]:
    """$0 placeholder at the original date, when that date is in the month."""
    if not in_month(original, year, month):
        return []
    date_str = format_naive_date(original)
    return [
        Occurrence(
            day=original.day,
            date_str=date_str,
            amount=0.0,
            is_override=True,
            is_skipped=True,
            is_split=is_split,
            split_part=split_part,
            original_date=date_str,
        )
    ]


def moved_occurrences(
    override: InstanceOverride,
    year: int,
    month: int,
    *,
    default_amount: float,
) -> List[Occurrence]:
    """Occurrences a non-skipped override places inside (year, month)."""
    new_date = parse_naive_date(override.new_date)
    out: List[Occurrence] = []

    if override.split is not None:
        second_date = parse_naive_date(override.split.second_date)
        if in_month(new_date, year, month):
            out.append(Occurrence(
                day=new_date.day,
                date_str=format_naive_date(new_date),
                amount=override.split.first_amount,
                is_override=True,
                is_split=True,
                split_part=1,
                original_date=override.original_date,
            ))
        if in_month(second_date, year, month):
            out.append(Occurrence(
                day=second_date.day,
                date_str=format_naive_date(second_date),
                amount=override.split.second_amount,
                is_override=True,
                is_split=True,
                split_part=2,
                original_date=override.original_date,
            ))
        return out

    if in_month(new_date, year, month):
        amount = override.new_amount if override.new_amount is not None else default_amount
        out.append(Occurrence(
            day=new_date.day,
            date_str=format_naive_date(new_date),
            amount=amount,
            is_override=True,
            original_date=override.original_date,
        ))
    return out


def scheduled_occurrences(item: Item, when: date, year: int, month: int) -> List[Occurrence]:
    """
    Occurrence(s) for one default schedule date, after applying its override.

    A date outside the month yields nothing unless an override moves it in.
    """
    date_str = format_naive_date(when)
    override = resolve(item.overrides, date_str)

    if override is None:
        if not in_month(when, year, month):
            return []
        return [Occurrence(day=when.day, date_str=date_str, amount=item.amount)]

    if override.is_skipped:
        return skipped_occurrence(when, year, month)

    return moved_occurrences(override, year, month, default_amount=item.amount)


def inbound_occurrences(item: Item, year: int, month: int) -> List[Occurrence]:
    """Overrides moved into (year, month) from an original date in another month."""
    out: List[Occurrence] = []
    for override in item.overrides.values():
        if override.is_skipped:
            continue
        original = parse_naive_date(override.original_date)
        if in_month(original, year, month):
            continue
        out.extend(moved_occurrences(override, year, month, default_amount=item.amount))
    return out
