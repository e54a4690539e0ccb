"""
Labor cost allocation: recorded wages plus the pro-rated manager salary,
scaled by the employer markup.
"""

from dataclasses import dataclass
from decimal import Decimal

ZERO = Decimal("0")


@dataclass(frozen=True)
class LaborCostBreakdown:
    recorded_labor_cost: Decimal
    manager_salary: Decimal
    manager_daily_cost: Decimal
    manager_allocated_cost: Decimal
    markup: Decimal
    total_labor_cost: Decimal


class LaborCostAllocator:

    def allocate(
        self,
        recorded_labor_cost: Decimal,
        actual_day_weight_sum: Decimal,
        expected_work_days: Decimal,
        manager_salary: Decimal,
        markup: Decimal,
    ) -> LaborCostBreakdown:
        """
        Allocate the manager's monthly salary over the weighted days
        actually recorded.

        manager_daily_cost is 0 when no work days are expected.
        """
        if expected_work_days > 0:
            manager_daily_cost = manager_salary / expected_work_days
        else:
            manager_daily_cost = ZERO

        manager_allocated_cost = manager_daily_cost * actual_day_weight_sum
        total = (recorded_labor_cost + manager_allocated_cost) * markup

        return LaborCostBreakdown(
            recorded_labor_cost=recorded_labor_cost,
            manager_salary=manager_salary,
            manager_daily_cost=manager_daily_cost,
            manager_allocated_cost=manager_allocated_cost,
            markup=markup,
            total_labor_cost=total,
        )
