"""Tests for the pricing engine."""
from datetime import timedelta
from decimal import Decimal

import pytest

from conftest import SHOP_TZ, shop_time
from engine.pricing import (
    daily_rate,
    days_elapsed,
    estimate_live_price,
    is_overdue,
    price_breakdown,
    revise_rental,
    settle_rental,
)
from engine.rentals import ActiveRental, LineItem, SettledRental
from exceptions import InvalidStateError, ValidationError

RATES = {1: Decimal(100000), 2: Decimal(50000)}


def active_rental(line_items=None, discount=None, rental_date=None, due_date=None):
    rental_date = rental_date or shop_time(2026, 1, 1)
    return ActiveRental(
        id=7,
        customer_id=1,
        line_items=tuple(line_items or [LineItem(item_id=1, quantity=2)]),
        rental_date=rental_date,
        due_date=due_date or rental_date + timedelta(days=2),
        discount_percent=discount,
        notes=None,
    )


class TestDaysElapsed:

    def test_same_calendar_day_counts_as_one(self):
        assert days_elapsed(shop_time(2026, 3, 5, 8), shop_time(2026, 3, 5, 21), SHOP_TZ) == 1

    def test_days_are_counted_inclusively(self):
        assert days_elapsed(shop_time(2026, 3, 1, 23), shop_time(2026, 3, 3, 1), SHOP_TZ) == 3

    def test_return_before_rental_date_still_counts_one_day(self):
        assert days_elapsed(shop_time(2026, 3, 5), shop_time(2026, 3, 1), SHOP_TZ) == 1

    def test_calendar_days_follow_shop_timezone(self):
        # 23:30 and 00:30 local are different days even though only an hour apart
        start = shop_time(2026, 3, 1, 23, 30)
        end = shop_time(2026, 3, 2, 0, 30)
        assert days_elapsed(start, end, SHOP_TZ) == 2


class TestDailyRate:

    def test_sums_rate_times_quantity(self):
        lines = [LineItem(1, 2), LineItem(2, 3)]
        assert daily_rate(lines, RATES) == Decimal(350000)

    def test_unknown_items_cost_nothing(self):
        assert daily_rate([LineItem(99, 4)], RATES) == Decimal(0)

    def test_rates_are_read_at_computation_time(self):
        rental = active_rental()
        as_of = shop_time(2026, 1, 1, 18)
        before = estimate_live_price(rental, RATES, as_of, SHOP_TZ)
        after = estimate_live_price(rental, {1: Decimal(120000)}, as_of, SHOP_TZ)
        assert before == Decimal(200000)
        assert after == Decimal(240000)


class TestSettleRental:

    def test_end_to_end_price(self):
        rental = active_rental(discount=Decimal(10))
        settled = settle_rental(rental, RATES, shop_time(2026, 1, 3, 17), Decimal(20000), SHOP_TZ)

        breakdown = price_breakdown(
            rental.line_items, rental.rental_date, rental.discount_percent, RATES,
            shop_time(2026, 1, 3, 17), Decimal(20000), SHOP_TZ,
        )
        assert breakdown.days == 3
        assert breakdown.daily_rate == Decimal(200000)
        assert breakdown.gross_price == Decimal(600000)
        assert breakdown.discount_amount == Decimal(60000)
        assert isinstance(settled, SettledRental)
        assert settled.total_price == Decimal(560000)
        assert settled.surcharge == Decimal(20000)
        assert settled.return_date == shop_time(2026, 1, 3, 17)

    def test_settled_rental_keeps_its_terms(self):
        rental = active_rental(discount=Decimal(5))
        settled = settle_rental(rental, RATES, shop_time(2026, 1, 2), tz=SHOP_TZ)
        assert settled.id == rental.id
        assert settled.line_items == rental.line_items
        assert settled.discount_percent == Decimal(5)

    def test_surcharge_is_added_after_rounding_and_not_discounted(self):
        rental = active_rental(line_items=[LineItem(3, 1)], discount=Decimal(50))
        rates = {3: Decimal(15001)}
        settled = settle_rental(rental, rates, shop_time(2026, 1, 1), Decimal(999), SHOP_TZ)
        # 15001 * 0.5 = 7500.5 rounds half up to 7501
        assert settled.total_price == Decimal(7501) + Decimal(999)

    def test_surcharge_is_additive(self):
        rental = active_rental(discount=Decimal(12.5))
        when = shop_time(2026, 1, 9)
        low = settle_rental(rental, RATES, when, Decimal(1000), SHOP_TZ)
        high = settle_rental(rental, RATES, when, Decimal(46000), SHOP_TZ)
        assert high.total_price - low.total_price == Decimal(45000)

    def test_live_estimate_matches_settlement_without_surcharge(self):
        rental = active_rental(discount=Decimal(15))
        when = shop_time(2026, 1, 6, 12)
        estimate = estimate_live_price(rental, RATES, when, SHOP_TZ)
        settled = settle_rental(rental, RATES, when, Decimal(30000), SHOP_TZ)
        assert settled.total_price == estimate + Decimal(30000)

    def test_settling_a_settled_rental_is_refused(self):
        settled = settle_rental(active_rental(), RATES, shop_time(2026, 1, 2), tz=SHOP_TZ)
        with pytest.raises(InvalidStateError):
            settle_rental(settled, RATES, shop_time(2026, 1, 2), tz=SHOP_TZ)

    def test_negative_surcharge_is_rejected(self):
        with pytest.raises(ValidationError):
            settle_rental(active_rental(), RATES, shop_time(2026, 1, 2), Decimal(-1), SHOP_TZ)

    def test_fractional_surcharge_is_rejected(self):
        with pytest.raises(ValidationError):
            settle_rental(active_rental(), RATES, shop_time(2026, 1, 2), Decimal("0.5"), SHOP_TZ)

    def test_defaults_to_now_when_no_return_date(self):
        settled = settle_rental(active_rental(), RATES)
        assert settled.return_date.tzinfo is not None


class TestPricingProperties:

    @pytest.mark.parametrize("discount", [None, Decimal(0), Decimal(10), Decimal(33), Decimal(100)])
    def test_price_never_decreases_with_more_days(self, discount):
        rental = active_rental(discount=discount)
        prices = [
            estimate_live_price(rental, RATES, shop_time(2026, 1, 1) + timedelta(days=n), SHOP_TZ)
            for n in range(0, 30)
        ]
        assert prices == sorted(prices)

    @pytest.mark.parametrize("discount", [Decimal(0), Decimal("0.5"), Decimal(25), Decimal("99.9"), Decimal(100)])
    def test_discount_stays_within_gross(self, discount):
        breakdown = price_breakdown(
            [LineItem(1, 3)], shop_time(2026, 1, 1), discount, RATES, shop_time(2026, 1, 4), tz=SHOP_TZ,
        )
        assert Decimal(0) <= breakdown.discount_amount <= breakdown.gross_price

    def test_full_discount_is_free(self):
        rental = active_rental(discount=Decimal(100))
        assert estimate_live_price(rental, RATES, shop_time(2026, 1, 5), SHOP_TZ) == Decimal(0)


class TestEstimateLivePrice:

    def test_refuses_settled_rentals(self):
        settled = settle_rental(active_rental(), RATES, shop_time(2026, 1, 2), tz=SHOP_TZ)
        with pytest.raises(InvalidStateError):
            estimate_live_price(settled, RATES, shop_time(2026, 1, 3), SHOP_TZ)


class TestReviseRental:

    def test_replaces_terms(self):
        rental = active_rental()
        revised = revise_rental(
            rental,
            line_items=[{"item_id": 2, "quantity": 1}],
            due_date=shop_time(2026, 1, 10),
            discount_percent=Decimal(20),
            tz=SHOP_TZ,
        )
        assert revised.line_items == (LineItem(2, 1),)
        assert revised.due_date == shop_time(2026, 1, 10)
        assert revised.discount_percent == Decimal(20)
        assert revised.rental_date == rental.rental_date

    def test_discount_can_be_cleared(self):
        revised = revise_rental(active_rental(discount=Decimal(10)), discount_percent=None)
        assert revised.discount_percent is None

    def test_live_estimate_follows_revision(self):
        rental = active_rental()
        when = shop_time(2026, 1, 2)
        revised = revise_rental(rental, line_items=[LineItem(1, 3)])
        assert estimate_live_price(revised, RATES, when, SHOP_TZ) == Decimal(600000)

    def test_settled_rentals_cannot_be_revised(self):
        settled = settle_rental(active_rental(), RATES, shop_time(2026, 1, 2), tz=SHOP_TZ)
        with pytest.raises(InvalidStateError):
            revise_rental(settled, notes="late")

    @pytest.mark.parametrize("line_items", [[], [LineItem(1, 0)], [LineItem(1, 1), LineItem(1, 2)]])
    def test_malformed_line_items_are_rejected(self, line_items):
        with pytest.raises(ValidationError):
            revise_rental(active_rental(), line_items=line_items)

    def test_due_date_before_rental_date_is_rejected(self):
        with pytest.raises(ValidationError):
            revise_rental(active_rental(), due_date=shop_time(2025, 12, 30), tz=SHOP_TZ)

    def test_discount_out_of_range_is_rejected(self):
        with pytest.raises(ValidationError):
            revise_rental(active_rental(), discount_percent=Decimal(120))


class TestIsOverdue:

    def test_active_rental_past_due_is_overdue(self):
        rental = active_rental(due_date=shop_time(2026, 1, 3))
        assert is_overdue(rental, shop_time(2026, 1, 3, 11))
        assert not is_overdue(rental, shop_time(2026, 1, 3, 9))

    def test_settled_rental_is_never_overdue(self):
        settled = settle_rental(active_rental(due_date=shop_time(2026, 1, 2)), RATES, shop_time(2026, 1, 9), tz=SHOP_TZ)
        assert not is_overdue(settled, shop_time(2026, 2, 1))
