"""
Record types, frequency schema, configuration and calendar utilities.
No projection logic lives here.
"""

from .schema import SKIPPED, FREQUENCIES, EXPENSE_CATEGORIES, ScheduleKind
from .config import ProjectionConfig, DEFAULT_CONFIG
from .models import (
    AccountState,
    CashFlowSnapshot,
    CreditCard,
    Expense,
    Income,
    InstanceOverride,
    Item,
    Occurrence,
    OverrideSplit,
    PaymentPlan,
    SplitConfig,
)
from .utils import (
    days_in_month,
    first_weekday_of_month,
    format_naive_date,
    parse_naive_date,
)

__all__ = [
    "SKIPPED",
    "FREQUENCIES",
    "EXPENSE_CATEGORIES",
    "ScheduleKind",
    "ProjectionConfig",
    "DEFAULT_CONFIG",
    "AccountState",
    "CashFlowSnapshot",
    "CreditCard",
    "Expense",
    "Income",
    "InstanceOverride",
    "Item",
    "Occurrence",
    "OverrideSplit",
    "PaymentPlan",
    "SplitConfig",
    "days_in_month",
    "first_weekday_of_month",
    "format_naive_date",
    "parse_naive_date",
]
