"""
Data quality checks for a snapshot before it is projected.

The engine never raises on odd business data; it quietly emits nothing. These
checks surface the cases where "nothing" is probably not what the user meant:
- Unknown frequencies and missing schedule dates
- Split items without their split configuration
- Split parts that do not add up to the item amount
- Negative payment counts, unknown plan cadences, and amounts that do not
  match the plan's computed payment
- Credit cards without an APR
- Dates that do not parse
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

from core.models import CashFlowSnapshot, Expense, Item
from core.schema import FREQUENCIES, INCOME, INCOME_FREQUENCIES, PLAN_FREQUENCIES
from core.utils import parse_naive_date
from engine.payment_plans import payment_amount, total_payments


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a snapshot."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def _bad_date(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        parse_naive_date(value)
    except (TypeError, ValueError):
        return True
    return False


def _check_item(item: Item, result: ValidationResult) -> None:
    label = f"{item.kind} {item.name or item.id!r}"

    if item.frequency not in FREQUENCIES:
        result.errors.append(f"{label}: unknown frequency {item.frequency!r}.")
    elif item.kind == INCOME and item.frequency not in INCOME_FREQUENCIES:
        result.warnings.append(f"{label}: frequency {item.frequency!r} is meant for expenses.")

    for name in ("start_date", "date"):
        if _bad_date(getattr(item, name)):
            result.errors.append(f"{label}: unparseable {name} {getattr(item, name)!r}.")

    if item.frequency == "once":
        if not (item.date or item.start_date):
            result.warnings.append(f"{label}: one-time item has no date and never occurs.")
    elif not item.anchor_date:
        result.warnings.append(f"{label}: recurring item has no start date and never occurs.")

    if item.amount < 0:
        result.warnings.append(f"{label}: negative amount {item.amount}.")

    for key, override in item.overrides.items():
        if _bad_date(key):
            result.errors.append(f"{label}: override keyed by unparseable date {key!r}.")
        if not override.is_skipped and _bad_date(override.new_date):
            result.errors.append(f"{label}: override {key} moves to unparseable date {override.new_date!r}.")
        if override.split is not None and _bad_date(override.split.second_date):
            result.errors.append(f"{label}: override {key} splits to unparseable date {override.split.second_date!r}.")


def _check_expense(expense: Expense, result: ValidationResult) -> None:
    label = f"expense {expense.name or expense.id!r}"

    if expense.frequency == "split":
        cfg = expense.split_config
        if cfg is None:
            result.warnings.append(f"{label}: split frequency without a split configuration; no payments are generated.")
        elif abs(cfg.first_amount + cfg.second_amount - expense.amount) > 0.005:
            result.warnings.append(
                f"{label}: split parts {cfg.first_amount} + {cfg.second_amount} "
                f"do not add up to {expense.amount}."
            )

    plan = expense.payment_plan
    if plan is not None and plan.payment_count < 0:
        result.warnings.append(f"{label}: negative payment count {plan.payment_count}; no payments are generated.")
    if plan is not None and plan.frequency not in PLAN_FREQUENCIES:
        result.warnings.append(f"{label}: unknown plan frequency {plan.frequency!r}; treated as monthly.")
    if plan is not None and total_payments(plan) > 0:
        expected = payment_amount(plan)
        if abs(expected - expense.amount) > 0.005:
            result.warnings.append(
                f"{label}: amount {expense.amount} differs from the plan payment {expected} "
                f"({plan.total_debt} over {total_payments(plan)} payments)."
            )
    if expense.frequency == "payment_plan" and plan is None:
        result.warnings.append(f"{label}: payment_plan frequency without a plan; treated as monthly.")

    cc = expense.credit_card
    if cc is not None:
        if not cc.apr:
            result.warnings.append(f"{label}: credit card has no APR; no interest is charged.")
        elif cc.apr < 0:
            result.errors.append(f"{label}: negative APR {cc.apr}.")
        if _bad_date(cc.balance_as_of_date):
            result.errors.append(f"{label}: unparseable balance date {cc.balance_as_of_date!r}.")


def validate_snapshot(snapshot: CashFlowSnapshot) -> ValidationResult:
    """
    Run all checks on a snapshot.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    """
    result = ValidationResult()
    account = snapshot.account

    # --- Account ---
    if _bad_date(account.starting_date):
        result.errors.append(f"Unparseable starting date {account.starting_date!r}.")
        return result  # every projection replays from this date
    if account.floor_threshold > account.warning_threshold:
        result.warnings.append(
            f"Floor threshold {account.floor_threshold} is above the warning threshold "
            f"{account.warning_threshold}; warnings will never show."
        )

    # --- Ids ---
    counts = Counter(item.id for item in snapshot.items)
    dup = sorted(item_id for item_id, n in counts.items() if n > 1)
    if dup:
        result.errors.append(f"Duplicate item ids: {dup}")

    # --- Items ---
    for item in snapshot.items:
        _check_item(item, result)
        if isinstance(item, Expense):
            _check_expense(item, result)

    return result
