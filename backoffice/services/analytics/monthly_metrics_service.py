"""
Monthly metrics service.

Entry point for recomputing one business month: fetch, resolve
parameters, compute KPIs and comparisons, then persist the full row.
Callers are expected to have authorized the request already.
"""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from backoffice.db.data_source import MetricsDataSource
from backoffice.repositories.analytics import MonthlyMetricsRepository
from backoffice.schemas.analytics import MonthlyMetricsRow
from backoffice.services.analytics.comparison import ComparisonEngine
from backoffice.services.analytics.goal_resolver import CostCategory, GoalResolver
from backoffice.services.analytics.kpi_calculator import KpiCalculator, ProductKpi
from backoffice.services.analytics.labor_cost import LaborCostAllocator
from backoffice.services.analytics.metrics_persister import MetricsPersister, MetricsSnapshot
from backoffice.services.analytics.raw_data_fetcher import MonthlyRawData, RawDataFetcher
from backoffice.services.analytics.work_schedule import WorkScheduleCalculator
from backoffice.services.base import BaseService, ServiceResult
from backoffice.utils.date_utils import DateUtilsError, MonthPeriod

MIN_YEAR = 2000
MAX_YEAR = 2100


class MonthlyMetricsService(BaseService):
    """
    Service that refreshes and reads monthly business metrics.

    Every refresh recomputes the whole row from a fresh read of the
    upstream data; concurrent refreshes of the same month are
    last-write-wins.
    """

    def __init__(
        self,
        data_source: MetricsDataSource,
        fetcher: Optional[RawDataFetcher] = None,
        schedule_calculator: Optional[WorkScheduleCalculator] = None,
        labor_allocator: Optional[LaborCostAllocator] = None,
        kpi_calculator: Optional[KpiCalculator] = None,
        comparison_engine: Optional[ComparisonEngine] = None,
        persister: Optional[MetricsPersister] = None,
    ):
        super().__init__(data_source)
        self.fetcher = fetcher or RawDataFetcher(data_source)
        self.schedule_calculator = schedule_calculator or WorkScheduleCalculator()
        self.labor_allocator = labor_allocator or LaborCostAllocator()
        self.kpi_calculator = kpi_calculator or KpiCalculator()
        self.comparison_engine = comparison_engine or ComparisonEngine(
            self.schedule_calculator, self.kpi_calculator
        )
        self.persister = persister or MetricsPersister(data_source)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def refresh_metrics(
        self,
        business_id: str,
        year: int,
        month: int,
    ) -> ServiceResult[MonthlyMetricsRow]:
        """
        Recompute and persist the metrics row for one business month.

        Args:
            business_id: Target business
            year: Calendar year (2000-2100)
            month: Calendar month (1-12)

        Returns:
            ServiceResult containing the row as written
        """
        period_result = self._validate_period(year, month)
        if not period_result.is_success:
            return period_result
        period = period_result.data

        log = self._logger.bind(business_id=business_id, year=year, month=month)
        log.info(f"Refreshing monthly metrics for {period}")

        try:
            raw = self.fetcher.fetch(business_id, period)
            snapshot = self.compute(raw)
            row = self.persister.persist(snapshot)
        except Exception as e:
            return self._handle_exception(
                e,
                "refresh monthly metrics",
                business_id,
                {"year": year, "month": month},
            )

        log.info(f"Monthly metrics refreshed for {period}")
        return ServiceResult.success(row, message="Metrics refreshed")

    def get_metrics(
        self,
        business_id: str,
        year: int,
        month: int,
    ) -> ServiceResult[MonthlyMetricsRow]:
        """Read the persisted row for one business month."""
        period_result = self._validate_period(year, month)
        if not period_result.is_success:
            return period_result

        try:
            with self.data_source.session() as db:
                row = MonthlyMetricsRepository(db).get_by_period(business_id, year, month)
                if row is None:
                    return ServiceResult.not_found("Monthly metrics", f"{business_id}/{year}-{month:02d}")
                return ServiceResult.success(MonthlyMetricsRow.model_validate(row))
        except SQLAlchemyError as e:
            return self._handle_exception(e, "get monthly metrics", business_id)

    # -------------------------------------------------------------------------
    # Computation
    # -------------------------------------------------------------------------

    def compute(self, raw: MonthlyRawData) -> MetricsSnapshot:
        """Run the formula pipeline over already-fetched data."""
        resolver = GoalResolver(raw.goal, raw.defaults)
        vat_rate = resolver.vat_rate()
        markup = resolver.markup()

        self._logger.debug(
            f"Resolved VAT {vat_rate.value} ({vat_rate.source.value}), "
            f"markup {markup.value} ({markup.source.value})"
        )

        daily = raw.daily
        expected_days = self.schedule_calculator.expected_work_days(raw.schedule, raw.period)

        revenue = self.kpi_calculator.revenue(
            gross=daily.total_income,
            vat_rate=vat_rate.value,
            actual_day_weight_sum=daily.sum_day_factors,
            expected_work_days=expected_days,
            target=resolver.revenue_target(),
        )
        income_before_vat = revenue.income_before_vat

        labor_breakdown = self.labor_allocator.allocate(
            recorded_labor_cost=daily.total_labor_cost,
            actual_day_weight_sum=daily.sum_day_factors,
            expected_work_days=expected_days,
            manager_salary=resolver.manager_salary().value,
            markup=markup.value,
        )

        products: List[ProductKpi] = [
            ProductKpi(
                name=product.name,
                cost=self.kpi_calculator.cost(
                    product.cost, income_before_vat, resolver.product_target_pct(product)
                ),
            )
            for product in raw.products
        ]

        return MetricsSnapshot(
            business_id=raw.business_id,
            period=raw.period,
            actual_work_days=daily.work_days,
            actual_day_factors=daily.sum_day_factors,
            expected_work_days=expected_days,
            revenue=revenue,
            labor=self.kpi_calculator.cost(
                labor_breakdown.total_labor_cost,
                income_before_vat,
                resolver.target_pct(CostCategory.LABOR),
            ),
            food=self.kpi_calculator.cost(
                raw.invoices.food_cost,
                income_before_vat,
                resolver.target_pct(CostCategory.FOOD),
            ),
            current_expenses=self.kpi_calculator.cost(
                raw.invoices.current_expenses,
                income_before_vat,
                resolver.target_pct(CostCategory.CURRENT_EXPENSES),
            ),
            products=products,
            income_origin=self.kpi_calculator.income_breakdown(raw.income_sources),
            previous_month=self.comparison_engine.compare(
                revenue.monthly_pace, raw.previous_month, raw.defaults, raw.schedule
            ),
            previous_year=self.comparison_engine.compare(
                revenue.monthly_pace, raw.previous_year, raw.defaults, raw.schedule
            ),
            vat_rate=vat_rate.value,
            markup=markup.value,
            labor_breakdown=labor_breakdown,
            total_labor_hours=daily.total_labor_hours,
            total_discounts=daily.total_discounts,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _validate_period(self, year: int, month: int) -> ServiceResult[MonthPeriod]:
        if not (MIN_YEAR <= year <= MAX_YEAR):
            return ServiceResult.validation_failure(
                f"Year must be between {MIN_YEAR} and {MAX_YEAR}",
                field="year",
                details={"year": year},
            )
        try:
            return ServiceResult.success(MonthPeriod(year, month))
        except DateUtilsError as e:
            return ServiceResult.validation_failure(str(e), field="month", details={"month": month})
