"""
Cash-flow projection engine — occurrence generation, credit-card amortization,
daily ledgers, and the query facade over a snapshot.
"""

from .occurrences import occurrences_in_month
from .amortizer import balance_at_month, project_payoff, credit_card_status
from .payment_plans import payment_amount, plan_end_date
from .projection import balance_at_month_start, balance_on, build_month
from .runner import CashFlowEngine, project_range

__all__ = [
    "occurrences_in_month",
    "balance_at_month",
    "project_payoff",
    "credit_card_status",
    "payment_amount",
    "plan_end_date",
    "balance_at_month_start",
    "balance_on",
    "build_month",
    "CashFlowEngine",
    "project_range",
]
