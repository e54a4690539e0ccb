from decimal import Decimal

from backoffice.services.analytics import LaborCostAllocator


def test_manager_cost_is_prorated_over_weighted_days():
    result = LaborCostAllocator().allocate(
        recorded_labor_cost=Decimal("2000"),
        actual_day_weight_sum=Decimal("1"),
        expected_work_days=Decimal("22"),
        manager_salary=Decimal("4400"),
        markup=Decimal("1.0"),
    )
    assert result.manager_daily_cost == Decimal("200")
    assert result.total_labor_cost == Decimal("2200")


def test_partial_days_and_markup():
    result = LaborCostAllocator().allocate(
        recorded_labor_cost=Decimal("1000"),
        actual_day_weight_sum=Decimal("2.5"),
        expected_work_days=Decimal("20"),
        manager_salary=Decimal("4000"),
        markup=Decimal("1.25"),
    )
    # (1000 + 200 * 2.5) * 1.25
    assert result.manager_allocated_cost == Decimal("500")
    assert result.total_labor_cost == Decimal("1875")


def test_zero_expected_days_short_circuits_manager_cost():
    result = LaborCostAllocator().allocate(
        recorded_labor_cost=Decimal("0"),
        actual_day_weight_sum=Decimal("3"),
        expected_work_days=Decimal("0"),
        manager_salary=Decimal("4400"),
        markup=Decimal("1.2"),
    )
    assert result.manager_daily_cost == Decimal("0")
    assert result.total_labor_cost == Decimal("0")
