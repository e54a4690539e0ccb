from decimal import Decimal

from backoffice.repositories.analytics import IncomeSourceTotal
from backoffice.services.analytics import KpiCalculator, ResolvedValue, ValueSource
from backoffice.services.analytics.metrics_persister import quantize


def _target(value):
    return ResolvedValue(Decimal(value), ValueSource.GOAL)


def test_income_before_vat_round_trip():
    calculator = KpiCalculator()
    gross = Decimal("11800")
    vat = Decimal("0.18")
    income = calculator.income_before_vat(gross, vat)
    assert income == Decimal("10000")
    assert quantize(income * (1 + vat)) == gross


def test_non_positive_vat_divisor_yields_zero_income():
    assert KpiCalculator.income_before_vat(Decimal("500"), Decimal("-1")) == Decimal("0")


def test_revenue_pace_and_target_diff():
    kpi = KpiCalculator().revenue(
        gross=Decimal("11800"),
        vat_rate=Decimal("0.18"),
        actual_day_weight_sum=Decimal("10"),
        expected_work_days=Decimal("22"),
        target=_target("20000"),
    )
    assert kpi.daily_avg == Decimal("1000")
    assert kpi.monthly_pace == Decimal("22000")
    assert kpi.target_diff_pct == Decimal("10")
    assert quantize(kpi.target_diff_amount) == Decimal("909.09")


def test_revenue_without_target_has_null_diffs():
    kpi = KpiCalculator().revenue(
        gross=Decimal("11800"),
        vat_rate=Decimal("0.18"),
        actual_day_weight_sum=Decimal("1"),
        expected_work_days=Decimal("22"),
        target=ResolvedValue(Decimal("0"), ValueSource.CONSTANT),
    )
    assert kpi.target_diff_pct is None
    assert kpi.target_diff_amount is None


def test_revenue_with_no_recorded_days():
    kpi = KpiCalculator().revenue(
        gross=Decimal("0"),
        vat_rate=Decimal("0.18"),
        actual_day_weight_sum=Decimal("0"),
        expected_work_days=Decimal("22"),
        target=_target("1000"),
    )
    assert kpi.daily_avg == Decimal("0")
    assert kpi.monthly_pace == Decimal("0")
    assert kpi.target_diff_pct == Decimal("-100")


def test_cost_percentage_and_diff():
    kpi = KpiCalculator().cost(Decimal("3000"), Decimal("10000"), _target("28"))
    assert kpi.pct == Decimal("30")
    assert kpi.diff_pct == Decimal("2")
    assert kpi.diff_amount == Decimal("200")


def test_cost_without_target_keeps_percentage_but_nulls_diff():
    kpi = KpiCalculator().cost(Decimal("3000"), Decimal("10000"), _target("0"))
    assert kpi.pct == Decimal("30")
    assert kpi.target_pct == Decimal("0")
    assert kpi.diff_pct is None
    assert kpi.diff_amount is None


def test_cost_against_zero_income():
    kpi = KpiCalculator().cost(Decimal("3000"), Decimal("0"), _target("28"))
    assert kpi.pct == Decimal("0")
    assert kpi.diff_amount == Decimal("0")


def test_income_breakdown_by_origin():
    sources = [
        IncomeSourceTotal("s1", "private", Decimal("1000"), 10),
        IncomeSourceTotal("s2", "private", Decimal("500"), 5),
        IncomeSourceTotal("s3", "business", Decimal("3000"), 4),
        IncomeSourceTotal("s4", None, Decimal("100"), 1),
    ]
    totals = KpiCalculator().income_breakdown(sources)
    assert totals.private_income == Decimal("1600")
    assert totals.private_orders_count == 16
    assert totals.private_avg_ticket == Decimal("100")
    assert totals.business_income == Decimal("3000")
    assert totals.business_avg_ticket == Decimal("750")


def test_income_breakdown_without_orders():
    totals = KpiCalculator().income_breakdown([IncomeSourceTotal("s1", "business", Decimal("50"), 0)])
    assert totals.business_avg_ticket == Decimal("0")
    assert totals.private_income == Decimal("0")
