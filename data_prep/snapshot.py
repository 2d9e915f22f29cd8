"""
Stored document schema, the camelCase JSON shape persisted by storage.

Pydantic models here only describe and coerce the document (numeric strings
become numbers, unknown keys are ignored). Conversion to the immutable engine
records in core.models happens in to_snapshot(); the reverse, for handing an
edited snapshot back to storage, in snapshot_to_document().

Account-level numbers that are missing or unparsable fall back to defaults
(starting balance 0, thresholds from ProjectionConfig) instead of failing the
whole load.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from core.config import DEFAULT_CONFIG, ProjectionConfig
from core.models import (
    AccountState,
    CashFlowSnapshot,
    CreditCard,
    Expense,
    Income,
    InstanceOverride,
    OverrideSplit,
    PaymentPlan,
    SplitConfig,
)
from core.utils import format_naive_date

logger = logging.getLogger(__name__)


class _Document(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class OverrideSplitDoc(_Document):
    first_amount: float
    second_amount: float
    second_date: str


class InstanceOverrideDoc(_Document):
    original_date: str
    new_date: Optional[str] = None
    new_amount: Optional[float] = None
    note: Optional[str] = None
    split: Optional[OverrideSplitDoc] = None


class CreditCardDoc(_Document):
    total_debt: float = 0.0
    current_balance: Optional[float] = None
    balance_as_of_date: Optional[str] = None
    apr: float = 0.0
    minimum_payment: float = 0.0


class PaymentPlanDoc(_Document):
    total_debt: float = 0.0
    payment_count: int = 0
    frequency: str = "monthly"
    second_day: Optional[int] = None


class SplitConfigDoc(_Document):
    first_day: int
    first_amount: float
    second_day: int
    second_amount: float


class ItemDoc(_Document):
    id: str
    name: str = ""
    amount: float = 0.0
    frequency: str = "monthly"
    start_date: Optional[str] = None
    date: Optional[str] = None
    overrides: List[InstanceOverrideDoc] = Field(default_factory=list)

    @field_validator("overrides", mode="before")
    @classmethod
    def _null_overrides(cls, value: Any) -> Any:
        return [] if value is None else value


class IncomeDoc(ItemDoc):
    pass


class ExpenseDoc(ItemDoc):
    category: str = "other"
    credit_card: Optional[CreditCardDoc] = None
    payment_plan: Optional[PaymentPlanDoc] = None
    split_config: Optional[SplitConfigDoc] = None


class CashFlowDocument(_Document):
    id: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="user_id")
    starting_balance: Optional[float] = None
    starting_date: Optional[str] = None
    warning_threshold: Optional[float] = None
    floor_threshold: Optional[float] = None
    incomes: List[IncomeDoc] = Field(default_factory=list)
    expenses: List[ExpenseDoc] = Field(default_factory=list)
    category_colors: Dict[str, str] = Field(default_factory=dict)

    @field_validator("starting_balance", "warning_threshold", "floor_threshold", mode="before")
    @classmethod
    def _lenient_number(cls, value: Any) -> Optional[float]:
        if value is None or value == "":
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric account value %r", value)
            return None
        return None if math.isnan(number) else number

    @field_validator("incomes", "expenses", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("category_colors", mode="before")
    @classmethod
    def _null_dict(cls, value: Any) -> Any:
        return {} if value is None else value


# ---------------------------------------------------------------------------
# document -> records
# ---------------------------------------------------------------------------

def _override_map(docs: List[InstanceOverrideDoc]) -> Dict[str, InstanceOverride]:
    # keyed by original date; a later entry for the same date wins
    out: Dict[str, InstanceOverride] = {}
    for doc in docs:
        split = None
        if doc.split is not None:
            split = OverrideSplit(
                first_amount=doc.split.first_amount,
                second_amount=doc.split.second_amount,
                second_date=doc.split.second_date,
            )
        out.pop(doc.original_date, None)
        out[doc.original_date] = InstanceOverride(
            original_date=doc.original_date,
            new_date=doc.new_date,
            new_amount=doc.new_amount,
            note=doc.note,
            split=split,
        )
    return out


def _credit_card(doc: CreditCardDoc, today: date) -> CreditCard:
    current_balance = doc.current_balance
    if current_balance is None:
        current_balance = doc.total_debt
    as_of = doc.balance_as_of_date or format_naive_date(today.replace(day=1))
    return CreditCard(
        total_debt=doc.total_debt,
        current_balance=current_balance,
        balance_as_of_date=as_of,
        apr=doc.apr,
        minimum_payment=doc.minimum_payment,
    )


def _income(doc: IncomeDoc) -> Income:
    return Income(
        id=doc.id,
        name=doc.name,
        amount=doc.amount,
        frequency=doc.frequency,
        start_date=doc.start_date,
        date=doc.date,
        overrides=_override_map(doc.overrides),
    )


def _expense(doc: ExpenseDoc, today: date) -> Expense:
    plan = None
    if doc.payment_plan is not None:
        plan = PaymentPlan(
            total_debt=doc.payment_plan.total_debt,
            payment_count=doc.payment_plan.payment_count,
            frequency=doc.payment_plan.frequency,
            second_day=doc.payment_plan.second_day,
        )
    split = None
    if doc.split_config is not None:
        split = SplitConfig(
            first_day=doc.split_config.first_day,
            first_amount=doc.split_config.first_amount,
            second_day=doc.split_config.second_day,
            second_amount=doc.split_config.second_amount,
        )
    start_date = doc.start_date
    if doc.credit_card is not None and not (start_date or doc.date):
        # cards saved without a due date pay from today
        start_date = format_naive_date(today)
    return Expense(
        id=doc.id,
        name=doc.name,
        amount=doc.amount,
        frequency=doc.frequency,
        start_date=start_date,
        date=doc.date,
        overrides=_override_map(doc.overrides),
        category=doc.category,
        credit_card=_credit_card(doc.credit_card, today) if doc.credit_card is not None else None,
        payment_plan=plan,
        split_config=split,
    )


def to_snapshot(
    doc: CashFlowDocument,
    *,
    today: date,
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> CashFlowSnapshot:
    """Build engine records from a validated document, filling account defaults."""
    account = AccountState(
        starting_balance=doc.starting_balance if doc.starting_balance is not None else 0.0,
        starting_date=doc.starting_date or format_naive_date(today),
        warning_threshold=(
            doc.warning_threshold if doc.warning_threshold is not None
            else config.default_warning_threshold
        ),
        floor_threshold=(
            doc.floor_threshold if doc.floor_threshold is not None
            else config.default_floor_threshold
        ),
        category_colors=dict(doc.category_colors),
    )
    return CashFlowSnapshot(
        account=account,
        incomes=tuple(_income(d) for d in doc.incomes),
        expenses=tuple(_expense(d, today) for d in doc.expenses),
        id=doc.id,
        user_id=doc.user_id,
    )


# ---------------------------------------------------------------------------
# records -> document
# ---------------------------------------------------------------------------

def _override_docs(overrides: Dict[str, InstanceOverride]) -> List[InstanceOverrideDoc]:
    docs = []
    for o in overrides.values():
        split = None
        if o.split is not None:
            split = OverrideSplitDoc(
                first_amount=o.split.first_amount,
                second_amount=o.split.second_amount,
                second_date=o.split.second_date,
            )
        docs.append(InstanceOverrideDoc(
            original_date=o.original_date,
            new_date=o.new_date,
            new_amount=o.new_amount,
            note=o.note,
            split=split,
        ))
    return docs


def _expense_doc(e: Expense) -> ExpenseDoc:
    cc = e.credit_card
    plan = e.payment_plan
    split = e.split_config
    return ExpenseDoc(
        id=e.id,
        name=e.name,
        amount=e.amount,
        frequency=e.frequency,
        start_date=e.start_date,
        date=e.date,
        overrides=_override_docs(e.overrides),
        category=e.category,
        credit_card=CreditCardDoc(
            total_debt=cc.total_debt,
            current_balance=cc.current_balance,
            balance_as_of_date=cc.balance_as_of_date,
            apr=cc.apr,
            minimum_payment=cc.minimum_payment,
        ) if cc is not None else None,
        payment_plan=PaymentPlanDoc(
            total_debt=plan.total_debt,
            payment_count=plan.payment_count,
            frequency=plan.frequency,
            second_day=plan.second_day,
        ) if plan is not None else None,
        split_config=SplitConfigDoc(
            first_day=split.first_day,
            first_amount=split.first_amount,
            second_day=split.second_day,
            second_amount=split.second_amount,
        ) if split is not None else None,
    )


def snapshot_to_document(snapshot: CashFlowSnapshot) -> Dict[str, Any]:
    """Storage-ready camelCase mapping; absent optional fields are omitted."""
    a = snapshot.account
    doc = CashFlowDocument(
        id=snapshot.id,
        user_id=snapshot.user_id,
        starting_balance=a.starting_balance,
        starting_date=a.starting_date,
        warning_threshold=a.warning_threshold,
        floor_threshold=a.floor_threshold,
        incomes=[
            IncomeDoc(
                id=i.id,
                name=i.name,
                amount=i.amount,
                frequency=i.frequency,
                start_date=i.start_date,
                date=i.date,
                overrides=_override_docs(i.overrides),
            )
            for i in snapshot.incomes
        ],
        expenses=[_expense_doc(e) for e in snapshot.expenses],
        category_colors=dict(a.category_colors),
    )
    return doc.model_dump(mode="json", by_alias=True, exclude_none=True)
