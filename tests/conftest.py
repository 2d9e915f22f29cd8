"""Shared fixtures for the test suite."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the top-level packages importable without installing.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.models import (  # noqa: E402
    AccountState,
    CashFlowSnapshot,
    CreditCard,
    Expense,
    Income,
    SplitConfig,
)


@pytest.fixture
def account():
    """$1000 on 2024-01-01 with the default thresholds."""
    return AccountState(starting_balance=1000.0, starting_date="2024-01-01")


@pytest.fixture
def paycheck():
    return Income(
        id="inc-paycheck",
        name="Paycheck",
        amount=2000.0,
        frequency="biweekly",
        start_date="2024-01-05",
    )


@pytest.fixture
def rent():
    return Expense(
        id="exp-rent",
        name="Rent",
        amount=1500.0,
        frequency="monthly",
        start_date="2024-01-01",
        category="housing",
    )


@pytest.fixture
def card():
    """$1200 as of 2024-01-01 at 24% APR, paying $500 on the 15th."""
    return Expense(
        id="exp-card",
        name="Visa",
        amount=500.0,
        frequency="monthly",
        start_date="2024-01-15",
        category="credit_card",
        credit_card=CreditCard(
            total_debt=1500.0,
            current_balance=1200.0,
            balance_as_of_date="2024-01-01",
            apr=24.0,
            minimum_payment=35.0,
        ),
    )


@pytest.fixture
def split_rent():
    """$500 paid as $300 on the 1st and $200 on the 15th, from March 2024."""
    return Expense(
        id="exp-split",
        name="Rent",
        amount=500.0,
        frequency="split",
        start_date="2024-03-01",
        category="housing",
        split_config=SplitConfig(first_day=1, first_amount=300.0, second_day=15, second_amount=200.0),
    )


@pytest.fixture
def snapshot(account, paycheck, rent):
    return CashFlowSnapshot(account=account, incomes=(paycheck,), expenses=(rent,))


@pytest.fixture
def document():
    """Stored camelCase document, as storage hands it over."""
    return {
        "id": "doc-1",
        "user_id": "user-1",
        "startingBalance": "1000",
        "startingDate": "2024-01-01",
        "warningThreshold": 400,
        "floorThreshold": "75",
        "incomes": [
            {
                "id": "inc-paycheck",
                "name": "Paycheck",
                "amount": "2000",
                "frequency": "biweekly",
                "startDate": "2024-01-05",
            }
        ],
        "expenses": [
            {
                "id": "exp-rent",
                "name": "Rent",
                "amount": 1500,
                "frequency": "monthly",
                "startDate": "2024-01-01",
                "category": "housing",
                "overrides": [
                    {"originalDate": "2024-02-01", "newDate": "2024-02-03", "note": "late"},
                ],
            },
            {
                "id": "exp-card",
                "name": "Visa",
                "amount": 500,
                "frequency": "monthly",
                "startDate": "2024-01-15",
                "category": "credit_card",
                "creditCard": {
                    "totalDebt": 1500,
                    "currentBalance": 1200,
                    "balanceAsOfDate": "2024-01-01",
                    "apr": 24,
                    "minimumPayment": 35,
                },
            },
        ],
        "categoryColors": {"housing": "blue"},
    }
