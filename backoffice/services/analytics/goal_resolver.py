"""
Goal resolver.

Every tunable parameter of the monthly computation is resolved through
one chain: the month's goal row, then the business defaults, then a
constant. Results carry the tier they came from.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from backoffice.config import settings
from backoffice.repositories.analytics import BusinessDefaults, GoalSnapshot, ProductUsageTotal

ZERO = Decimal("0")


class ValueSource(str, Enum):
    GOAL = "goal"
    BUSINESS_DEFAULT = "business_default"
    CONSTANT = "constant"


class CostCategory(str, Enum):
    """Cost categories that carry a target percentage."""

    LABOR = "labor"
    FOOD = "food"
    CURRENT_EXPENSES = "current_expenses"


_CATEGORY_FIELDS = {
    CostCategory.LABOR: "labor_cost_target_pct",
    CostCategory.FOOD: "food_cost_target_pct",
    CostCategory.CURRENT_EXPENSES: "operating_cost_target_pct",
}


@dataclass(frozen=True)
class ResolvedValue:
    value: Decimal
    source: ValueSource

    @property
    def is_set(self) -> bool:
        """A target of zero or less means no target was configured."""
        return self.value > 0


def has_target(target: Optional[ResolvedValue]) -> bool:
    return target is not None and target.is_set


class GoalResolver:
    """Resolves parameters for one (business, month) pair."""

    def __init__(
        self,
        goal: Optional[GoalSnapshot],
        defaults: Optional[BusinessDefaults],
        default_vat_rate: Optional[Decimal] = None,
        default_markup: Optional[Decimal] = None,
    ):
        self.goal = goal
        self.defaults = defaults
        self.default_vat_rate = Decimal(str(
            default_vat_rate if default_vat_rate is not None else settings.DEFAULT_VAT_RATE
        ))
        self.default_markup = Decimal(str(
            default_markup if default_markup is not None else settings.DEFAULT_MARKUP
        ))

    def _resolve(self, field_name: str, constant: Decimal, use_goal: bool = True) -> ResolvedValue:
        if use_goal and self.goal is not None:
            value = getattr(self.goal, field_name, None)
            if value is not None:
                return ResolvedValue(value, ValueSource.GOAL)

        if self.defaults is not None:
            value = getattr(self.defaults, field_name, None)
            if value is not None:
                return ResolvedValue(value, ValueSource.BUSINESS_DEFAULT)

        return ResolvedValue(constant, ValueSource.CONSTANT)

    def vat_rate(self) -> ResolvedValue:
        return self._resolve("vat_percentage", self.default_vat_rate)

    def markup(self) -> ResolvedValue:
        return self._resolve("markup_percentage", self.default_markup)

    def revenue_target(self) -> ResolvedValue:
        return self._resolve("revenue_target", ZERO)

    def target_pct(self, category: CostCategory) -> ResolvedValue:
        return self._resolve(_CATEGORY_FIELDS[category], ZERO)

    def manager_salary(self) -> ResolvedValue:
        # Salary is a business setting only; goals never override it.
        return self._resolve("manager_monthly_salary", ZERO, use_goal=False)

    def product_target_pct(self, product: ProductUsageTotal) -> ResolvedValue:
        """Goal override for this product, then the product's own target, then 0."""
        if self.goal is not None:
            value = self.goal.managed_product_targets.get(str(product.product_id))
            if value is not None:
                return ResolvedValue(value, ValueSource.GOAL)

        if product.default_target_pct is not None:
            return ResolvedValue(product.default_target_pct, ValueSource.BUSINESS_DEFAULT)

        return ResolvedValue(ZERO, ValueSource.CONSTANT)
