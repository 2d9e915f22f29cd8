"""
Immutable records for the stored cash-flow document and the values derived from it.

Items form a tagged union (Income | Expense) over a shared base. Every edit goes
through dataclasses.replace or the builders in data_prep.edits and yields a new
record; nothing here is mutated in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional, Tuple

from .schema import EXPENSE, INCOME, SKIPPED, ScheduleKind, cadence_kind


@dataclass(frozen=True)
class OverrideSplit:
    """Turns one occurrence into two payments."""
    first_amount: float
    second_amount: float
    second_date: str


@dataclass(frozen=True)
class InstanceOverride:
    """Per-date exception to an item's schedule, keyed by original_date."""
    original_date: str
    new_date: Optional[str] = None   # None or SKIPPED both mean skipped
    new_amount: Optional[float] = None
    note: Optional[str] = None
    split: Optional[OverrideSplit] = None

    @property
    def is_skipped(self) -> bool:
        return not self.new_date or self.new_date == SKIPPED


@dataclass(frozen=True)
class CreditCard:
    total_debt: float                # provenance only
    current_balance: float           # authoritative as of balance_as_of_date
    balance_as_of_date: str
    apr: float = 0.0                 # annual percent
    minimum_payment: float = 0.0

    @property
    def monthly_rate(self) -> float:
        return (self.apr or 0.0) / 100.0 / 12.0


@dataclass(frozen=True)
class PaymentPlan:
    total_debt: float
    payment_count: int
    frequency: str = "monthly"
    second_day: Optional[int] = None


@dataclass(frozen=True)
class SplitConfig:
    first_day: int
    first_amount: float
    second_day: int
    second_amount: float


@dataclass(frozen=True)
class Item:
    id: str
    name: str
    amount: float
    frequency: str
    start_date: Optional[str] = None
    date: Optional[str] = None
    overrides: Dict[str, InstanceOverride] = field(default_factory=dict)
    schedule: ScheduleKind = field(init=False, repr=False, compare=False)

    kind: ClassVar[str] = ""
    sign: ClassVar[int] = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "schedule", self._resolve_schedule())

    def _resolve_schedule(self) -> ScheduleKind:
        if self.frequency == "once":
            return ScheduleKind.ONE_TIME
        return cadence_kind(self.frequency)

    @property
    def anchor_date(self) -> Optional[str]:
        """Date the schedule is counted from."""
        return self.start_date or self.date

    @property
    def payment_cap(self) -> Optional[int]:
        """Finite number of occurrences, None when open-ended."""
        return None


@dataclass(frozen=True)
class Income(Item):
    kind: ClassVar[str] = INCOME
    sign: ClassVar[int] = 1


@dataclass(frozen=True)
class Expense(Item):
    category: str = "other"
    credit_card: Optional[CreditCard] = None
    payment_plan: Optional[PaymentPlan] = None
    split_config: Optional[SplitConfig] = None

    kind: ClassVar[str] = EXPENSE
    sign: ClassVar[int] = -1

    def _resolve_schedule(self) -> ScheduleKind:
        # precedence: one-time, credit card, split, then the calendar cadence
        if self.frequency == "once":
            return ScheduleKind.ONE_TIME
        if self.credit_card is not None:
            return ScheduleKind.CREDIT_CARD
        if self.frequency == "split":
            return ScheduleKind.SPLIT
        if self.payment_plan is not None and self.payment_plan.frequency:
            return cadence_kind(self.payment_plan.frequency)
        return cadence_kind(self.frequency)

    @property
    def payment_cap(self) -> Optional[int]:
        # a zero/missing count means open-ended
        if self.payment_plan is None or not self.payment_plan.payment_count:
            return None
        return int(self.payment_plan.payment_count)


@dataclass(frozen=True)
class Occurrence:
    """One concrete (date, amount) instance of an item inside a month. Never stored."""
    day: int
    date_str: str
    amount: float
    is_override: bool = False
    is_skipped: bool = False
    is_split: bool = False
    split_part: Optional[int] = None
    original_date: Optional[str] = None


@dataclass(frozen=True)
class AccountState:
    starting_balance: float
    starting_date: str
    warning_threshold: float = 500.0
    floor_threshold: float = 50.0
    category_colors: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CashFlowSnapshot:
    """The whole stored document for one account owner."""
    account: AccountState
    incomes: Tuple[Income, ...] = ()
    expenses: Tuple[Expense, ...] = ()
    id: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def items(self) -> Tuple[Item, ...]:
        """Incomes first, then expenses, in stored order."""
        return tuple(self.incomes) + tuple(self.expenses)

    def find_item(self, item_id: str) -> Item:
        for item in self.items:
            if item.id == item_id:
                return item
        raise KeyError(f"Unknown item id: {item_id!r}")
