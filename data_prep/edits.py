"""
Copy-on-write edits. Every mutation returns a NEW snapshot for storage to persist.

Nothing here touches the snapshot it was given. Items are located by id; an
unknown id raises KeyError. Overrides are keyed by their original date, so
saving one for a date that already has an override replaces it.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date
from typing import Any, Optional, Union

from core.config import DEFAULT_CONFIG, ProjectionConfig
from core.models import (
    CashFlowSnapshot,
    Expense,
    Income,
    InstanceOverride,
    Item,
    OverrideSplit,
)
from core.schema import SKIPPED
from core.utils import add_months, parse_naive_date
from engine.events import DayEvent


def new_item_id() -> str:
    return uuid.uuid4().hex


def _with_items(snapshot: CashFlowSnapshot, incomes, expenses) -> CashFlowSnapshot:
    return replace(snapshot, incomes=tuple(incomes), expenses=tuple(expenses))


def add_item(snapshot: CashFlowSnapshot, item: Item) -> CashFlowSnapshot:
    """Append an income or expense; an empty id is replaced with a fresh one."""
    if not isinstance(item, (Income, Expense)):
        raise ValueError(f"Unsupported item type: {type(item).__name__}")
    if not item.id:
        item = replace(item, id=new_item_id())
    if isinstance(item, Expense):
        return _with_items(snapshot, snapshot.incomes, snapshot.expenses + (item,))
    return _with_items(snapshot, snapshot.incomes + (item,), snapshot.expenses)


def update_item(snapshot: CashFlowSnapshot, item_id: str, **changes: Any) -> CashFlowSnapshot:
    """Replace fields of one item; the schedule kind is re-resolved."""
    snapshot.find_item(item_id)
    incomes = [replace(i, **changes) if i.id == item_id else i for i in snapshot.incomes]
    expenses = [replace(e, **changes) if e.id == item_id else e for e in snapshot.expenses]
    return _with_items(snapshot, incomes, expenses)


def delete_item(snapshot: CashFlowSnapshot, item_id: str) -> CashFlowSnapshot:
    snapshot.find_item(item_id)
    return _with_items(
        snapshot,
        [i for i in snapshot.incomes if i.id != item_id],
        [e for e in snapshot.expenses if e.id != item_id],
    )


def update_account(snapshot: CashFlowSnapshot, **changes: Any) -> CashFlowSnapshot:
    """Change starting balance/date, thresholds or category colors."""
    return replace(snapshot, account=replace(snapshot.account, **changes))


def save_instance_override(
    snapshot: CashFlowSnapshot,
    item_id: str,
    override: InstanceOverride,
) -> CashFlowSnapshot:
    """Record `override` for its original date, replacing any earlier one."""
    item = snapshot.find_item(item_id)
    overrides = {k: v for k, v in item.overrides.items() if k != override.original_date}
    overrides[override.original_date] = override
    return update_item(snapshot, item_id, overrides=overrides)


def remove_instance_override(
    snapshot: CashFlowSnapshot,
    item_id: str,
    original_date: str,
) -> CashFlowSnapshot:
    """Drop the override for `original_date`; a date without one is a no-op."""
    item = snapshot.find_item(item_id)
    overrides = {k: v for k, v in item.overrides.items() if k != original_date}
    return update_item(snapshot, item_id, overrides=overrides)


def _original_date(event: DayEvent) -> str:
    return event.original_date or event.instance_date


def build_instance_override(
    event: DayEvent,
    *,
    new_date: Optional[str] = None,
    new_amount: Optional[float] = None,
    note: Optional[str] = None,
    split_first_amount: Optional[float] = None,
    split_second_date: Optional[str] = None,
) -> InstanceOverride:
    """
    Override for one ledger event, from what the user entered.

    new_date defaults to where the event currently lands (which also restores a
    skipped instance). new_amount is kept only when it differs from the event's
    amount. A split is recorded only with a second date and two positive parts;
    the second part is the total minus the first.
    """
    total = new_amount if new_amount else event.amount
    split = None
    if split_second_date and split_first_amount and split_first_amount > 0:
        second_amount = total - split_first_amount
        if second_amount > 0:
            split = OverrideSplit(
                first_amount=split_first_amount,
                second_amount=second_amount,
                second_date=split_second_date,
            )

    return InstanceOverride(
        original_date=_original_date(event),
        new_date=new_date or event.instance_date,
        new_amount=new_amount if new_amount is not None and new_amount != event.amount else None,
        note=note or None,
        split=split,
    )


def skip_instance(event: DayEvent) -> InstanceOverride:
    return InstanceOverride(original_date=_original_date(event), new_date=SKIPPED, note="Skipped")


def restore_instance(event: DayEvent, item: Item) -> InstanceOverride:
    """Put a skipped instance back on its original date at the item's amount."""
    original = _original_date(event)
    amount = item.amount if event.is_skipped else event.amount
    return InstanceOverride(original_date=original, new_date=original, new_amount=amount, note="Restored")


def is_stale_edit(
    instance_date: Union[str, date],
    today: Optional[date] = None,
    *,
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> bool:
    """True when the instance predates the 1st of the month `stale_edit_months` back."""
    today = today or date.today()
    year, month = add_months(today.year, today.month, -config.stale_edit_months)
    return parse_naive_date(instance_date) < date(year, month, 1)
