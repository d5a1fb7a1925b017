from datetime import date
from decimal import Decimal

from mortgage_tracker.engine.amortization import build_schedule, schedule_summary
from mortgage_tracker.engine.overview import mortgage_overview
from mortgage_tracker.models.mortgage import Payment


def _payments(n, principal="236.07", interest="437.50"):
    return [
        Payment(
            payment_date=date(2025, i, 15),
            amount=Decimal("673.57"),
            principal=Decimal(principal),
            interest=Decimal(interest),
            payment_number=i,
        )
        for i in range(1, n + 1)
    ]


class TestMortgageOverview:
    def test_no_payments(self, canonical_mortgage):
        ov = mortgage_overview(canonical_mortgage, [], [], [])
        assert ov.payments_made == 0
        assert ov.remaining_balance == Decimal("150000")
        assert ov.progress_pct == 0
        assert ov.end_date == date(2055, 1, 15)
        assert ov.term_years == Decimal("30.00")

    def test_totals_match_schedule(self, canonical_mortgage, grace_condition):
        ov = mortgage_overview(canonical_mortgage, [grace_condition], [], [])
        summary = schedule_summary(build_schedule(canonical_mortgage, [grace_condition]))
        assert ov.total_interest == summary.total_interest
        assert ov.total_cost == Decimal("150000") + summary.total_interest

    def test_effective_rate(self, canonical_mortgage, payroll_bonification):
        ov = mortgage_overview(canonical_mortgage, [], [payroll_bonification], [])
        assert ov.total_bonification == Decimal("0.5")
        assert ov.effective_rate == Decimal("3.0")
        assert ov.nominal_rate == Decimal("3.5")

    def test_paid_progress(self, canonical_mortgage):
        ov = mortgage_overview(canonical_mortgage, [], [], _payments(3))
        assert ov.payments_made == 3
        assert ov.paid_principal == Decimal("708.21")
        assert ov.paid_interest == Decimal("1312.50")
        assert ov.remaining_balance == Decimal("149291.79")
        assert ov.progress_pct == Decimal("0.47")

    def test_blank_payment_fields(self, canonical_mortgage):
        payments = [Payment(payment_date=date(2025, 1, 15), amount=Decimal("673.57"))]
        ov = mortgage_overview(canonical_mortgage, [], [], payments)
        assert ov.paid_principal == 0
        assert ov.payments_made == 1

    def test_progress_capped(self, canonical_mortgage):
        payments = _payments(1, principal="200000", interest="0")
        ov = mortgage_overview(canonical_mortgage, [], [], payments)
        assert ov.progress_pct == Decimal("100")
