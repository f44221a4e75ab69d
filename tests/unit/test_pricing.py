from datetime import date, datetime
from decimal import Decimal

import pytest

from reservas.domain.errors import InvalidMoneyError
from reservas.domain.services.pricing import (
    CancellationField,
    PricingEngine,
    SwapField,
    rental_days,
)


@pytest.fixture
def pricing():
    return PricingEngine()


class TestRentalDays:
    def test_calendar_range_counts_nights(self):
        assert rental_days(date(2026, 3, 1), date(2026, 3, 3)) == 2

    def test_same_day_is_minimum_one_day(self):
        assert rental_days(date(2026, 3, 1), date(2026, 3, 1)) == 1

    def test_any_fraction_of_24_hours_is_a_full_day(self):
        start = datetime(2026, 3, 1, 10, 0)
        assert rental_days(start, datetime(2026, 3, 2, 10, 0)) == 1
        assert rental_days(start, datetime(2026, 3, 2, 12, 30)) == 2

    def test_inverted_range_is_reordered(self):
        assert rental_days(date(2026, 3, 3), date(2026, 3, 1)) == 2


class TestTotals:
    def test_daily_rate_195_over_two_days(self, pricing):
        total = pricing.total_for_range(Decimal("195"), date(2026, 3, 1), date(2026, 3, 3))
        assert total == Decimal("390")

    def test_total_is_deterministic(self, pricing):
        args = (Decimal("195"), date(2026, 3, 1), date(2026, 3, 3))
        assert pricing.total_for_range(*args) == pricing.total_for_range(*args)


class TestCancellation:
    def test_short_rental_keeps_15_percent_rounded_half_up(self, pricing, make_reservation):
        reservation = make_reservation(start=date(2026, 3, 1), end=date(2026, 3, 3), total="390")

        adjustment = pricing.compute_cancellation_adjustment(reservation)

        assert adjustment.days == 2
        assert adjustment.rate == Decimal("0.15")
        assert adjustment.penalty == Decimal("59")
        assert adjustment.refund == Decimal("331")
        assert not adjustment.overridden

    def test_long_rental_keeps_half(self, pricing, make_reservation):
        reservation = make_reservation(start=date(2026, 3, 1), end=date(2026, 3, 11), total="1000")

        adjustment = pricing.compute_cancellation_adjustment(reservation)

        assert adjustment.days == 10
        assert adjustment.penalty == Decimal("500")
        assert adjustment.refund == Decimal("500")

    def test_five_days_is_still_short_rental(self, pricing, make_reservation):
        reservation = make_reservation(start=date(2026, 3, 1), end=date(2026, 3, 6), total="1000")
        assert pricing.compute_cancellation_adjustment(reservation).rate == Decimal("0.15")

    def test_editing_penalty_recomputes_refund(self, pricing, make_reservation):
        adjustment = pricing.compute_cancellation_adjustment(make_reservation(total="390"))

        edited = adjustment.apply_override(CancellationField.PENALTY, "100")

        assert edited.penalty == Decimal("100")
        assert edited.refund == Decimal("290")
        assert edited.penalty + edited.refund == edited.total
        assert edited.suggested_penalty == Decimal("59")
        assert edited.overridden

    def test_editing_refund_recomputes_penalty(self, pricing, make_reservation):
        adjustment = pricing.compute_cancellation_adjustment(make_reservation(total="390"))

        edited = adjustment.apply_override("refund", Decimal("390"))

        assert edited.penalty == Decimal("0")
        assert edited.penalty + edited.refund == edited.total

    @pytest.mark.parametrize("value", ["-1", "390.01"])
    def test_override_outside_total_is_rejected(self, pricing, make_reservation, value):
        adjustment = pricing.compute_cancellation_adjustment(make_reservation(total="390"))
        with pytest.raises(InvalidMoneyError):
            adjustment.apply_override(CancellationField.PENALTY, value)


class TestSwap:
    def test_more_expensive_unit_means_client_owes_difference(self, pricing):
        adjustment = pricing.compute_swap_adjustment(
            Decimal("390"), Decimal("300"), date(2026, 3, 1), date(2026, 3, 3)
        )
        assert adjustment.new_total == Decimal("600")
        assert adjustment.diff == Decimal("210")
        assert adjustment.new_total - adjustment.old_total == adjustment.diff

    def test_cheaper_unit_means_credit(self, pricing):
        adjustment = pricing.compute_swap_adjustment(
            Decimal("600"), Decimal("195"), date(2026, 3, 1), date(2026, 3, 3)
        )
        assert adjustment.diff == Decimal("-210")

    def test_editing_new_total_recomputes_diff(self, pricing):
        adjustment = pricing.compute_swap_adjustment(
            Decimal("390"), Decimal("300"), date(2026, 3, 1), date(2026, 3, 3)
        )
        edited = adjustment.apply_override(SwapField.NEW_TOTAL, "500")
        assert edited.diff == Decimal("110")
        assert edited.suggested_new_total == Decimal("600")

    def test_editing_diff_recomputes_new_total(self, pricing):
        adjustment = pricing.compute_swap_adjustment(
            Decimal("390"), Decimal("300"), date(2026, 3, 1), date(2026, 3, 3)
        )
        edited = adjustment.apply_override(SwapField.DIFF, "-90")
        assert edited.new_total == Decimal("300")
        assert edited.new_total - edited.old_total == edited.diff

    def test_negative_new_total_is_rejected(self, pricing):
        adjustment = pricing.compute_swap_adjustment(
            Decimal("390"), Decimal("300"), date(2026, 3, 1), date(2026, 3, 3)
        )
        with pytest.raises(InvalidMoneyError):
            adjustment.apply_override(SwapField.DIFF, "-400")
