"""
Metrics source repository.

Parameterized aggregation queries over the upstream record sets the
monthly metrics engine consumes. Every query is scoped to one business
and, where dated, to the half-open interval [period.start, period.next_start).
Soft-deleted rows are always excluded.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from backoffice.models import (
    Business,
    BusinessSchedule,
    DailyEntry,
    DailyIncomeBreakdown,
    DailyProductUsage,
    ExpenseType,
    Goal,
    IncomeSource,
    Invoice,
    ManagedProduct,
    Supplier,
)
from backoffice.core.logging import get_logger
from backoffice.repositories.base.base_repository import BaseRepository
from backoffice.utils.date_utils import MonthPeriod

ZERO = Decimal("0")

logger = get_logger(__name__)


def to_decimal(value) -> Decimal:
    """Coerce a driver value (Decimal, int, float, str or None) to Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_optional_decimal(value) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DailyTotals:
    """Sums over the live daily entries of a period."""

    total_income: Decimal = ZERO
    total_labor_cost: Decimal = ZERO
    total_labor_hours: Decimal = ZERO
    total_discounts: Decimal = ZERO
    sum_day_factors: Decimal = ZERO
    work_days: int = 0


@dataclass(frozen=True)
class InvoiceTotals:
    """Invoice subtotals split by the supplier's expense type."""

    food_cost: Decimal = ZERO
    current_expenses: Decimal = ZERO


@dataclass(frozen=True)
class IncomeSourceTotal:
    income_source_id: str
    income_type: Optional[str]
    amount: Decimal
    orders_count: int


@dataclass(frozen=True)
class ProductUsageTotal:
    """Period consumption of one managed product, costed at time of use."""

    product_id: str
    name: str
    quantity: Decimal
    cost: Decimal
    default_target_pct: Optional[Decimal]


@dataclass(frozen=True)
class GoalSnapshot:
    vat_percentage: Optional[Decimal] = None
    markup_percentage: Optional[Decimal] = None
    revenue_target: Optional[Decimal] = None
    labor_cost_target_pct: Optional[Decimal] = None
    food_cost_target_pct: Optional[Decimal] = None
    operating_cost_target_pct: Optional[Decimal] = None
    managed_product_targets: Dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class BusinessDefaults:
    business_id: str
    name: str
    vat_percentage: Optional[Decimal] = None
    markup_percentage: Optional[Decimal] = None
    manager_monthly_salary: Optional[Decimal] = None
    revenue_target: Optional[Decimal] = None
    labor_cost_target_pct: Optional[Decimal] = None
    food_cost_target_pct: Optional[Decimal] = None
    operating_cost_target_pct: Optional[Decimal] = None


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class MetricsSourceRepository(BaseRepository[DailyEntry]):
    """Read-only aggregations feeding the monthly metrics engine."""

    def __init__(self, db: Session):
        super().__init__(DailyEntry, db)

    def _entries_in_period(self, stmt, business_id: str, period: MonthPeriod):
        return self._live(
            stmt.where(
                DailyEntry.business_id == business_id,
                DailyEntry.entry_date >= period.start,
                DailyEntry.entry_date < period.next_start,
            ),
            DailyEntry,
        )

    def get_daily_totals(self, business_id: str, period: MonthPeriod) -> DailyTotals:
        """Sum register, labor, discounts and day factors for a month."""
        stmt = self._entries_in_period(
            select(
                func.coalesce(func.sum(DailyEntry.total_register), 0),
                func.coalesce(func.sum(DailyEntry.labor_cost), 0),
                func.coalesce(func.sum(DailyEntry.labor_hours), 0),
                func.coalesce(func.sum(DailyEntry.discounts), 0),
                func.coalesce(func.sum(DailyEntry.day_factor), 0),
                func.count(DailyEntry.id),
            ),
            business_id,
            period,
        )
        row = self.db.execute(stmt).one()
        return DailyTotals(
            total_income=to_decimal(row[0]),
            total_labor_cost=to_decimal(row[1]),
            total_labor_hours=to_decimal(row[2]),
            total_discounts=to_decimal(row[3]),
            sum_day_factors=to_decimal(row[4]),
            work_days=int(row[5] or 0),
        )

    def get_invoice_totals(self, business_id: str, period: MonthPeriod) -> InvoiceTotals:
        """Sum invoice subtotals per supplier expense type."""
        stmt = (
            select(Supplier.expense_type, func.coalesce(func.sum(Invoice.subtotal), 0))
            .select_from(Invoice)
            .join(Supplier, Supplier.id == Invoice.supplier_id)
            .where(
                Invoice.business_id == business_id,
                Invoice.invoice_date >= period.start,
                Invoice.invoice_date < period.next_start,
                Invoice.deleted_at.is_(None),
            )
            .group_by(Supplier.expense_type)
        )
        by_type = {
            expense_type: to_decimal(total)
            for expense_type, total in self.db.execute(stmt).all()
        }
        return InvoiceTotals(
            food_cost=by_type.get(ExpenseType.GOODS_PURCHASES.value, ZERO),
            current_expenses=by_type.get(ExpenseType.CURRENT_EXPENSES.value, ZERO),
        )

    def get_income_breakdown(self, business_id: str, period: MonthPeriod) -> List[IncomeSourceTotal]:
        """
        Sum amount and orders per income source.

        income_type is None when the source is inactive, deleted or unknown.
        """
        totals_stmt = self._entries_in_period(
            select(
                DailyIncomeBreakdown.income_source_id,
                func.coalesce(func.sum(DailyIncomeBreakdown.amount), 0),
                func.coalesce(func.sum(DailyIncomeBreakdown.orders_count), 0),
            )
            .select_from(DailyIncomeBreakdown)
            .join(DailyEntry, DailyEntry.id == DailyIncomeBreakdown.daily_entry_id)
            .group_by(DailyIncomeBreakdown.income_source_id),
            business_id,
            period,
        )
        rows = self.db.execute(totals_stmt).all()
        if not rows:
            return []

        sources_stmt = self._live(
            select(IncomeSource.id, IncomeSource.income_type).where(
                IncomeSource.business_id == business_id,
                IncomeSource.is_active.is_(True),
            ),
            IncomeSource,
        )
        source_types = dict(self.db.execute(sources_stmt).all())

        return [
            IncomeSourceTotal(
                income_source_id=source_id,
                income_type=source_types.get(source_id),
                amount=to_decimal(amount),
                orders_count=int(orders or 0),
            )
            for source_id, amount, orders in rows
        ]

    def get_managed_product_usage(
        self,
        business_id: str,
        period: MonthPeriod,
        limit: int = 3,
    ) -> List[ProductUsageTotal]:
        """
        Consumption and stamped-cost totals for the first `limit` active
        managed products, in creation order.
        """
        products_stmt = self._live(
            select(ManagedProduct)
            .where(
                ManagedProduct.business_id == business_id,
                ManagedProduct.is_active.is_(True),
            )
            .order_by(ManagedProduct.created_at, ManagedProduct.id)
            .limit(limit),
            ManagedProduct,
        )
        products = list(self.db.execute(products_stmt).scalars().all())
        if not products:
            return []

        usage_stmt = self._entries_in_period(
            select(
                DailyProductUsage.product_id,
                func.coalesce(func.sum(DailyProductUsage.quantity), 0),
                func.coalesce(func.sum(DailyProductUsage.quantity * DailyProductUsage.unit_cost), 0),
            )
            .select_from(DailyProductUsage)
            .join(DailyEntry, DailyEntry.id == DailyProductUsage.daily_entry_id)
            .where(DailyProductUsage.product_id.in_([p.id for p in products]))
            .group_by(DailyProductUsage.product_id),
            business_id,
            period,
        )
        usage = {
            product_id: (to_decimal(quantity), to_decimal(cost))
            for product_id, quantity, cost in self.db.execute(usage_stmt).all()
        }

        return [
            ProductUsageTotal(
                product_id=product.id,
                name=product.name,
                quantity=usage.get(product.id, (ZERO, ZERO))[0],
                cost=usage.get(product.id, (ZERO, ZERO))[1],
                default_target_pct=to_optional_decimal(product.target_pct),
            )
            for product in products
        ]

    def get_goal(self, business_id: str, period: MonthPeriod) -> Optional[GoalSnapshot]:
        """Live goal row for the exact (business, year, month), if any."""
        stmt = self._live(
            select(Goal).where(
                Goal.business_id == business_id,
                Goal.year == period.year,
                Goal.month == period.month,
            ),
            Goal,
        )
        goal = self.db.execute(stmt).scalars().first()
        if goal is None:
            return None

        return GoalSnapshot(
            vat_percentage=to_optional_decimal(goal.vat_percentage),
            markup_percentage=to_optional_decimal(goal.markup_percentage),
            revenue_target=to_optional_decimal(goal.revenue_target),
            labor_cost_target_pct=to_optional_decimal(goal.labor_cost_target_pct),
            food_cost_target_pct=to_optional_decimal(goal.food_cost_target_pct),
            operating_cost_target_pct=to_optional_decimal(goal.operating_cost_target_pct),
            managed_product_targets=self._product_targets(goal),
        )

    @staticmethod
    def _product_targets(goal: Goal) -> Dict[str, Decimal]:
        """Per-product target overrides; unparseable entries are skipped."""
        targets: Dict[str, Decimal] = {}
        for product_id, pct in (goal.managed_product_targets or {}).items():
            if pct is None:
                continue
            try:
                targets[str(product_id)] = to_decimal(pct)
            except (InvalidOperation, TypeError, ValueError):
                logger.warning(
                    f"Ignoring invalid product target {pct!r} for product {product_id} "
                    f"in goal {goal.id}"
                )
        return targets

    def get_business_defaults(self, business_id: str) -> Optional[BusinessDefaults]:
        stmt = self._live(select(Business).where(Business.id == business_id), Business)
        business = self.db.execute(stmt).scalar_one_or_none()
        if business is None:
            return None

        return BusinessDefaults(
            business_id=business.id,
            name=business.name,
            vat_percentage=to_optional_decimal(business.vat_percentage),
            markup_percentage=to_optional_decimal(business.markup_percentage),
            manager_monthly_salary=to_optional_decimal(business.manager_monthly_salary),
            revenue_target=to_optional_decimal(business.revenue_target),
            labor_cost_target_pct=to_optional_decimal(business.labor_cost_target_pct),
            food_cost_target_pct=to_optional_decimal(business.food_cost_target_pct),
            operating_cost_target_pct=to_optional_decimal(business.operating_cost_target_pct),
        )

    def get_schedule(self, business_id: str) -> Dict[int, Decimal]:
        """Weekly schedule as day_of_week (0 = Sunday) -> day factor."""
        stmt = (
            select(BusinessSchedule.day_of_week, BusinessSchedule.day_factor)
            .where(BusinessSchedule.business_id == business_id)
            .order_by(BusinessSchedule.day_of_week)
        )
        return {
            int(day_of_week): to_decimal(day_factor)
            for day_of_week, day_factor in self.db.execute(stmt).all()
        }
