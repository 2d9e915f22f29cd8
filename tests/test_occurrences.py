from dataclasses import replace

import pytest

from core.models import Expense, Income, InstanceOverride, Occurrence, PaymentPlan, SplitConfig
from core.schema import SKIPPED, ScheduleKind
from engine.occurrences import dedupe_occurrences, occurrences_in_month


def days(item, year, month):
    return [o.day for o in occurrences_in_month(item, year, month)]


def plan_expense(frequency, count, start_date="2024-01-05", second_day=None):
    return Expense(
        id="plan", name="Dentist", amount=100.0, frequency="payment_plan", start_date=start_date,
        category="health",
        payment_plan=PaymentPlan(total_debt=1000.0, payment_count=count, frequency=frequency, second_day=second_day),
    )


class TestScheduleKind:
    def test_precedence(self, card, split_rent, rent):
        assert card.schedule is ScheduleKind.CREDIT_CARD
        assert split_rent.schedule is ScheduleKind.SPLIT
        assert rent.schedule is ScheduleKind.MONTHLY
        assert plan_expense("biweekly", 3).schedule is ScheduleKind.BIWEEKLY

    def test_once_wins_over_credit_card(self, card):
        assert replace(card, frequency="once", date="2024-01-15").schedule is ScheduleKind.ONE_TIME

    def test_quarterly_resolves_to_monthly(self, rent):
        assert replace(rent, frequency="quarterly").schedule is ScheduleKind.MONTHLY


class TestOneTime:
    @pytest.fixture
    def bonus(self):
        return Income(id="i-bonus", name="Bonus", amount=750.0, frequency="once", date="2024-02-14")

    def test_only_in_its_month(self, bonus):
        occs = occurrences_in_month(bonus, 2024, 2)
        assert [(o.day, o.date_str, o.amount) for o in occs] == [(14, "2024-02-14", 750.0)]
        assert occurrences_in_month(bonus, 2024, 1) == []
        assert occurrences_in_month(bonus, 2024, 3) == []
        assert occurrences_in_month(bonus, 2025, 2) == []

    def test_falls_back_to_start_date(self, bonus):
        item = replace(bonus, date=None, start_date="2024-03-01")
        assert days(item, 2024, 3) == [1]

    def test_no_date_never_occurs(self, bonus):
        assert occurrences_in_month(replace(bonus, date=None), 2024, 2) == []

    def test_moved_into_next_month_appears_once(self, bonus):
        item = replace(bonus, date="2024-01-31", overrides={
            "2024-01-31": InstanceOverride(original_date="2024-01-31", new_date="2024-02-03"),
        })
        assert occurrences_in_month(item, 2024, 1) == []
        assert days(item, 2024, 2) == [3]


class TestStepping:
    def test_weekly(self):
        item = Income(id="i", name="Tips", amount=100.0, frequency="weekly", start_date="2024-01-05")
        assert days(item, 2024, 1) == [5, 12, 19, 26]
        assert days(item, 2024, 2) == [2, 9, 16, 23]

    def test_weekly_includes_last_day_of_month(self):
        item = Income(id="i", name="Tips", amount=100.0, frequency="weekly", start_date="2024-01-03")
        assert days(item, 2024, 1) == [3, 10, 17, 24, 31]

    def test_biweekly(self, paycheck):
        assert days(paycheck, 2024, 1) == [5, 19]
        assert days(paycheck, 2024, 2) == [2, 16]
        assert days(paycheck, 2024, 3) == [1, 15, 29]

    def test_nothing_before_start(self, paycheck):
        assert days(paycheck, 2023, 12) == []

    def test_capped_plan_stops_after_count(self):
        item = plan_expense("biweekly", 3)
        assert days(item, 2024, 1) == [5, 19]
        assert days(item, 2024, 2) == [2]
        assert days(item, 2024, 3) == []


class TestSemimonthly:
    def test_early_start_defaults_second_day_to_15th(self):
        item = Income(id="i", name="Salary", amount=1800.0, frequency="semimonthly", start_date="2024-01-01")
        assert days(item, 2024, 1) == [1, 15]

    def test_late_start_defaults_second_day_to_28th(self):
        item = Income(id="i", name="Salary", amount=1800.0, frequency="semimonthly", start_date="2024-01-20")
        assert days(item, 2024, 1) == [20, 28]

    def test_second_day_dropped_when_not_after_first(self):
        item = Income(id="i", name="Salary", amount=1800.0, frequency="semimonthly", start_date="2024-01-31")
        assert days(item, 2024, 2) == [29]

    def test_plan_second_day_and_cap(self):
        item = plan_expense("semimonthly", 2, second_day=20)
        assert days(item, 2024, 1) == [5, 20]
        assert days(item, 2024, 2) == [5, 20]
        assert days(item, 2024, 3) == []


class TestMonthlyFamily:
    def test_monthly_clamps_to_month_end(self):
        item = Expense(id="e", name="Gym", amount=40.0, frequency="monthly", start_date="2024-01-31")
        assert days(item, 2024, 2) == [29]
        assert days(item, 2024, 4) == [30]

    def test_monthly_before_start(self, rent):
        assert days(rent, 2023, 12) == []

    def test_quarterly_behaves_as_monthly(self, rent):
        item = replace(rent, frequency="quarterly", start_date="2024-01-15")
        assert days(item, 2024, 2) == [15]
        assert days(item, 2024, 3) == [15]

    def test_bimonthly_even_offsets(self):
        item = Expense(id="e", name="Water", amount=90.0, frequency="bimonthly", start_date="2024-01-10")
        assert days(item, 2024, 1) == [10]
        assert days(item, 2024, 2) == []
        assert days(item, 2024, 3) == [10]

    def test_bimonthly_cap_counts_two_month_steps(self):
        item = plan_expense("bimonthly", 2, start_date="2024-01-10")
        assert days(item, 2024, 1) == [10]
        assert days(item, 2024, 3) == [10]
        assert days(item, 2024, 5) == []

    def test_monthly_plan_cap(self):
        item = plan_expense("monthly", 2)
        assert days(item, 2024, 1) == [5]
        assert days(item, 2024, 2) == [5]
        assert days(item, 2024, 3) == []

    def test_zero_count_is_open_ended(self):
        item = plan_expense("monthly", 0)
        assert days(item, 2030, 6) == [5]

    def test_negative_count_emits_nothing(self):
        item = plan_expense("monthly", -1)
        assert days(item, 2024, 1) == []


class TestSplit:
    def test_nothing_before_start(self, split_rent):
        assert occurrences_in_month(split_rent, 2024, 2) == []

    def test_two_parts_in_start_month(self, split_rent):
        occs = occurrences_in_month(split_rent, 2024, 3)
        assert [(o.day, o.amount, o.split_part) for o in occs] == [(1, 300.0, 1), (15, 200.0, 2)]
        assert all(o.is_split for o in occs)

    def test_missing_config_emits_nothing(self, split_rent):
        assert occurrences_in_month(replace(split_rent, split_config=None), 2024, 3) == []

    def test_part_skipped_independently(self, split_rent):
        item = replace(split_rent, overrides={
            "2024-03-15": InstanceOverride(original_date="2024-03-15", new_date=SKIPPED),
        })
        occs = occurrences_in_month(item, 2024, 3)
        assert [(o.day, o.amount, o.is_skipped, o.split_part) for o in occs] == [
            (1, 300.0, False, 1),
            (15, 0.0, True, 2),
        ]

    def test_part_moved(self, split_rent):
        item = replace(split_rent, overrides={
            "2024-03-01": InstanceOverride(original_date="2024-03-01", new_date="2024-03-04", new_amount=320.0),
        })
        occs = occurrences_in_month(item, 2024, 3)
        assert [(o.day, o.amount, o.split_part) for o in occs] == [(4, 320.0, 1), (15, 200.0, 2)]
        assert occs[0].original_date == "2024-03-01"

    def test_same_day_parts_with_different_amounts_both_kept(self, split_rent):
        item = replace(split_rent, split_config=SplitConfig(first_day=10, first_amount=100.0, second_day=10, second_amount=200.0))
        assert [o.amount for o in occurrences_in_month(item, 2024, 3)] == [100.0, 200.0]


class TestCreditCard:
    def test_payment_on_due_day(self, card):
        occs = occurrences_in_month(card, 2024, 1)
        assert [(o.day, o.amount) for o in occs] == [(15, 500.0)]

    def test_final_payment_is_capped_and_then_stops(self, card):
        small = replace(card, credit_card=replace(card.credit_card, current_balance=300.0, apr=0.0))
        assert [o.amount for o in occurrences_in_month(small, 2024, 1)] == [300.0]
        assert occurrences_in_month(small, 2024, 2) == []

    def test_skipped_payment_is_zero(self, card):
        item = replace(card, overrides={
            "2024-02-15": InstanceOverride(original_date="2024-02-15", new_date=SKIPPED),
        })
        occs = occurrences_in_month(item, 2024, 2)
        assert [(o.day, o.amount, o.is_skipped) for o in occs] == [(15, 0.0, True)]

    def test_moved_payment_uses_override_amount(self, card):
        item = replace(card, overrides={
            "2024-02-15": InstanceOverride(original_date="2024-02-15", new_date="2024-02-20", new_amount=600.0),
        })
        occs = occurrences_in_month(item, 2024, 2)
        assert [(o.day, o.amount) for o in occs] == [(20, 600.0)]
        assert occs[0].original_date == "2024-02-15"
        assert occs[0].is_override

    def test_nothing_before_first_payment(self, card):
        late = replace(card, start_date="2024-03-15")
        assert occurrences_in_month(late, 2024, 2) == []


def test_dedupe_keeps_first_and_sorts():
    a = Occurrence(day=9, date_str="2024-01-09", amount=10.0)
    b = Occurrence(day=3, date_str="2024-01-03", amount=5.0)
    dup = Occurrence(day=9, date_str="2024-01-09", amount=99.0, is_override=True)
    assert dedupe_occurrences([a, b, dup]) == [b, a]
