"""
Ledger records emitted by the projection builder for each day of a month.

An Occurrence says *when* and *how much*; a DayEvent adds *who* (item id, name,
category) so presentation can render and edit the instance without going back
to the snapshot. Expense split parts are labelled "Name (1/2)" / "Name (2/2)".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from core.models import Expense, Item, Occurrence
from core.schema import EXPENSE


@dataclass(frozen=True)
class DayEvent:
    """One occurrence placed on the ledger."""
    type: str                      # "income" | "expense"
    name: str
    amount: float                  # unsigned; type carries the direction
    id: str
    instance_date: str             # date the event actually lands on
    category: Optional[str] = None
    is_override: bool = False
    is_skipped: bool = False
    is_split: bool = False
    split_part: Optional[int] = None
    original_date: Optional[str] = None

    @property
    def signed_amount(self) -> float:
        return -self.amount if self.type == EXPENSE else self.amount


@dataclass(frozen=True)
class DayRecord:
    day: int
    events: Tuple[DayEvent, ...]
    change: float
    balance: float


def event_from_occurrence(item: Item, occ: Occurrence) -> DayEvent:
    name = item.name
    if item.kind == EXPENSE and occ.is_split and occ.split_part:
        name = f"{item.name} ({occ.split_part}/2)"

    return DayEvent(
        type=item.kind,
        name=name,
        amount=occ.amount,
        id=item.id,
        instance_date=occ.date_str,
        category=item.category if isinstance(item, Expense) else None,
        is_override=occ.is_override,
        is_skipped=occ.is_skipped,
        is_split=occ.is_split,
        split_part=occ.split_part,
        original_date=occ.original_date,
    )
