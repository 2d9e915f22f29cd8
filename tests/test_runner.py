from dataclasses import replace
from datetime import date

import pytest

from core.config import ProjectionConfig
from core.models import CashFlowSnapshot
from engine.runner import CashFlowEngine
from reports.aggregator import OUTLOOK_COLUMNS


@pytest.fixture
def engine(account, paycheck, rent, card):
    return CashFlowEngine(CashFlowSnapshot(account=account, incomes=(paycheck,), expenses=(rent, card)))


def test_project_month(engine):
    ledger = engine.project_month(2024, 1)
    assert len(ledger) == 31
    # 1000 - 1500 + 2000 - 500 + 2000
    assert ledger[-1].balance == pytest.approx(3000.0)


def test_month_stats(engine):
    stats = engine.month_stats(2024, 1)
    assert stats.lowest_balance == pytest.approx(-500.0)
    assert stats.total_expenses == pytest.approx(2000.0)
    assert stats.variable_budget == pytest.approx(2000.0)


def test_todays_balance(engine):
    assert engine.todays_balance(date(2024, 1, 15)) == pytest.approx(1000.0)
    assert engine.todays_balance("2024-01-19") == pytest.approx(3000.0)


def test_credit_card_status(engine):
    status = engine.credit_card_status("exp-card", 2024, 2)
    assert status.remaining == pytest.approx(738.48)
    assert status.payoff_date == date(2024, 4, 1)


@pytest.mark.parametrize("item_id", ["nope", "inc-paycheck"])
def test_credit_card_status_unknown(engine, item_id):
    with pytest.raises(KeyError):
        engine.credit_card_status(item_id, 2024, 1)


def test_outlook_horizons(engine):
    outlook = engine.outlook(2024, 1, "6m")
    assert list(outlook.columns) == OUTLOOK_COLUMNS
    assert len(outlook) == 6
    assert len(engine.outlook(2024, 1, "bogus")) == 12


def test_outlook_respects_config(engine):
    short = CashFlowEngine(engine.snapshot, ProjectionConfig(horizons=(("1y", 2),)))
    assert len(short.outlook(2024, 1)) == 2


def test_alerts(engine):
    [alert] = engine.alerts(2024, 1)
    assert alert.type == "danger"
    assert alert.text == "Balance drops to -$500.00 on day 1"

    flush = CashFlowEngine(replace(engine.snapshot, account=replace(engine.account, starting_balance=5000.0)))
    assert flush.alerts(2024, 1) == []


def test_queries_do_not_share_state(engine):
    first = engine.project_month(2024, 3)
    engine.project_month(2024, 1)
    assert engine.project_month(2024, 3) == first
