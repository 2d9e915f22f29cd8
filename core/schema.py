from __future__ import annotations

from enum import Enum
from typing import Tuple

# Sentinel stored in InstanceOverride.newDate when an occurrence is removed.
SKIPPED = "SKIPPED"

INCOME = "income"
EXPENSE = "expense"

# Frequencies accepted on the stored document. "quarterly", "payment_plan" and
# "split" are expense-only.
FREQUENCIES: Tuple[str, ...] = (
    "once",
    "weekly",
    "biweekly",
    "semimonthly",
    "monthly",
    "bimonthly",
    "quarterly",
    "payment_plan",
    "split",
)
INCOME_FREQUENCIES: Tuple[str, ...] = ("once", "weekly", "biweekly", "semimonthly", "monthly")
PLAN_FREQUENCIES: Tuple[str, ...] = ("weekly", "biweekly", "monthly", "bimonthly", "semimonthly")

# Expense categories in display order; anything else is grouped under "other".
EXPENSE_CATEGORIES: Tuple[str, ...] = (
    "housing",
    "utilities",
    "auto",
    "insurance",
    "food",
    "health",
    "entertainment",
    "subscriptions",
    "credit_card",
    "loan",
    "other",
)

# Semimonthly second payment day when a plan does not name one.
SEMIMONTHLY_EARLY_SECOND_DAY = 15
SEMIMONTHLY_LATE_SECOND_DAY = 28
# Payment-plan forms cap a derived second day at the 28th.
PLAN_SECOND_DAY_GAP = 14
PLAN_MAX_SECOND_DAY = 28


class ScheduleKind(str, Enum):
    """Effective schedule of an item, resolved once when the item is built."""

    ONE_TIME = "one_time"
    CREDIT_CARD = "credit_card"
    SPLIT = "split"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "semimonthly"
    BIMONTHLY = "bimonthly"
    # monthly, quarterly and any unrecognised cadence
    MONTHLY = "monthly"


_CADENCE_KINDS = {
    "weekly": ScheduleKind.WEEKLY,
    "biweekly": ScheduleKind.BIWEEKLY,
    "semimonthly": ScheduleKind.SEMIMONTHLY,
    "bimonthly": ScheduleKind.BIMONTHLY,
}


def cadence_kind(frequency: str) -> ScheduleKind:
    """Map a calendar cadence to its schedule kind; quarterly falls through to monthly."""
    return _CADENCE_KINDS.get(frequency, ScheduleKind.MONTHLY)
