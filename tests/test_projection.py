from dataclasses import replace

import pytest

from core.models import InstanceOverride
from core.schema import SKIPPED
from engine.projection import (
    balance_at_month_start,
    balance_on,
    build_month,
    project_months,
)


def by_day(ledger):
    return {r.day: r for r in ledger}


class TestScenarioA:
    """$1000 on 2024-01-01, $2000 biweekly paycheck from the 5th, $1500 rent on the 1st."""

    @pytest.fixture
    def ledger(self, account, paycheck, rent):
        return build_month(account, [paycheck, rent], 2024, 1)

    def test_daily_balances(self, ledger):
        days = by_day(ledger)
        assert days[1].balance == pytest.approx(-500.0)
        assert days[5].balance == pytest.approx(1500.0)
        assert days[19].balance == pytest.approx(3500.0)
        assert ledger[-1].balance == pytest.approx(3500.0)

    def test_every_day_present(self, ledger):
        assert [r.day for r in ledger] == list(range(1, 32))

    def test_balance_continuity(self, ledger):
        for prev, cur in zip(ledger, ledger[1:]):
            assert cur.balance == pytest.approx(prev.balance + cur.change)

    def test_events(self, ledger):
        day1 = by_day(ledger)[1]
        assert day1.change == pytest.approx(-1500.0)
        [event] = day1.events
        assert (event.type, event.name, event.amount, event.id) == ("expense", "Rent", 1500.0, "exp-rent")
        assert event.category == "housing"
        assert event.instance_date == "2024-01-01"

        [pay] = by_day(ledger)[5].events
        assert pay.type == "income"
        assert pay.category is None

    def test_next_month_opens_at_previous_close(self, account, paycheck, rent):
        items = [paycheck, rent]
        assert balance_at_month_start(account, items, 2024, 2) == pytest.approx(3500.0)
        feb = build_month(account, items, 2024, 2)
        assert by_day(feb)[1].balance == pytest.approx(2000.0)


class TestStartingDate:
    def test_ledger_starts_on_starting_day(self, account, paycheck, rent):
        mid = replace(account, starting_date="2024-01-10")
        ledger = build_month(mid, [paycheck, rent], 2024, 1)
        assert ledger[0].day == 10
        assert ledger[0].balance == pytest.approx(1000.0)
        assert by_day(ledger)[19].balance == pytest.approx(3000.0)

    def test_events_before_starting_day_are_not_replayed(self, account, paycheck, rent):
        mid = replace(account, starting_date="2024-01-10")
        assert balance_at_month_start(mid, [paycheck, rent], 2024, 2) == pytest.approx(3000.0)

    def test_month_before_start_opens_at_starting_balance(self, account, rent):
        ledger = build_month(account, [rent], 2023, 12)
        assert ledger[0].day == 1
        assert ledger[-1].balance == pytest.approx(1000.0)


class TestBalanceOn:
    def test_inclusive_of_the_day(self, account, paycheck, rent):
        items = [paycheck, rent]
        assert balance_on(account, items, "2024-01-04") == pytest.approx(-500.0)
        assert balance_on(account, items, "2024-01-05") == pytest.approx(1500.0)

    def test_later_month(self, account, paycheck, rent):
        # Jan close 3500, Feb 1 rent, Feb 2 paycheck
        assert balance_on(account, [paycheck, rent], "2024-02-02") == pytest.approx(4000.0)

    def test_before_start(self, account, paycheck, rent):
        assert balance_on(account, [paycheck, rent], "2023-06-01") == pytest.approx(1000.0)


class TestOverridesInLedger:
    def test_skipped_event_listed_without_changing_balance(self, account, paycheck, rent):
        skipped = replace(rent, overrides={
            "2024-01-01": InstanceOverride(original_date="2024-01-01", new_date=SKIPPED),
        })
        day1 = build_month(account, [paycheck, skipped], 2024, 1)[0]
        [event] = day1.events
        assert event.is_skipped
        assert event.amount == 0
        assert day1.balance == pytest.approx(1000.0)

    def test_split_parts_named(self, account, split_rent):
        ledger = by_day(build_month(account, [split_rent], 2024, 3))
        assert ledger[1].events[0].name == "Rent (1/2)"
        assert ledger[15].events[0].name == "Rent (2/2)"

    def test_same_day_events_all_applied(self, account, rent):
        parking = replace(rent, id="exp-parking", name="Parking", amount=100.0)
        day1 = build_month(account, [rent, parking], 2024, 1)[0]
        assert [e.name for e in day1.events] == ["Rent", "Parking"]
        assert day1.change == pytest.approx(-1600.0)

    def test_overrides_rewrite_history(self, account, paycheck, rent):
        items = [paycheck, rent]
        before = balance_at_month_start(account, items, 2024, 3)
        moved = replace(rent, overrides={
            "2024-01-01": InstanceOverride(original_date="2024-01-01", new_date="2024-01-01", new_amount=1000.0),
        })
        after = balance_at_month_start(account, [paycheck, moved], 2024, 3)
        assert after - before == pytest.approx(500.0)


def test_project_months_matches_independent_builds(account, paycheck, rent, card):
    items = [paycheck, rent, card]
    chained = project_months(account, items, 2024, 1, 4)
    assert [ym for ym, _, _ in chained] == [(2024, 1), (2024, 2), (2024, 3), (2024, 4)]
    for (year, month), opening, ledger in chained:
        assert opening == pytest.approx(balance_at_month_start(account, items, year, month))
        assert ledger[-1].balance == pytest.approx(build_month(account, items, year, month)[-1].balance)


def test_project_months_from_before_start(account, rent):
    chained = project_months(account, [rent], 2023, 11, 3)
    openings = [opening for _, opening, _ in chained]
    assert openings == pytest.approx([1000.0, 1000.0, 1000.0])


def test_empty_range(account, rent):
    assert project_months(account, [rent], 2024, 1, 0) == []
