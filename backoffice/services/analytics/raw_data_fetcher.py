"""
Raw data fetcher.

Fans the independent upstream reads for one monthly refresh out over a
thread pool. Each read opens its own session from the data source, so a
slow or failing query never holds another one up.

Failure policy:
- business defaults missing or unreadable: fatal (ConfigurationMissingError)
- primary-period aggregates unreadable: fatal (DataFetchError)
- goal, schedule and comparison reads unreadable: logged, treated as absent
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from backoffice.config import settings
from backoffice.core.exceptions import ConfigurationMissingError, DataFetchError
from backoffice.core.logging import get_logger
from backoffice.db.data_source import MetricsDataSource
from backoffice.models.analytics.monthly_metrics import MANAGED_PRODUCT_COLUMNS
from backoffice.repositories.analytics import (
    BusinessDefaults,
    DailyTotals,
    GoalSnapshot,
    IncomeSourceTotal,
    InvoiceTotals,
    MetricsSourceRepository,
    ProductUsageTotal,
)
from backoffice.utils.date_utils import MonthPeriod

logger = get_logger(__name__)


@dataclass(frozen=True)
class ComparisonRawData:
    """Inputs needed to project revenue pace for a comparison month."""

    period: MonthPeriod
    daily: DailyTotals = field(default_factory=DailyTotals)
    goal: Optional[GoalSnapshot] = None


@dataclass(frozen=True)
class MonthlyRawData:
    business_id: str
    period: MonthPeriod
    defaults: BusinessDefaults
    daily: DailyTotals
    invoices: InvoiceTotals
    income_sources: List[IncomeSourceTotal]
    products: List[ProductUsageTotal]
    goal: Optional[GoalSnapshot]
    schedule: Dict[int, Decimal]
    previous_month: ComparisonRawData
    previous_year: ComparisonRawData


# Reads whose failure aborts the refresh
REQUIRED_READS = ("daily", "invoices", "income_sources", "products")


class RawDataFetcher:
    """Concurrent reader of every record set a monthly refresh consumes."""

    def __init__(
        self,
        data_source: MetricsDataSource,
        max_workers: Optional[int] = None,
        product_slots: Optional[int] = None,
    ):
        self.data_source = data_source
        self.max_workers = max_workers or settings.METRICS_FETCH_WORKERS
        self.product_slots = product_slots or settings.MANAGED_PRODUCT_SLOTS
        if not 1 <= self.product_slots <= MANAGED_PRODUCT_COLUMNS:
            raise ValueError(
                f"product_slots must be between 1 and {MANAGED_PRODUCT_COLUMNS}, got {self.product_slots}"
            )

    def _read(self, reader: Callable[[MetricsSourceRepository], Any]) -> Any:
        with self.data_source.session() as db:
            return reader(MetricsSourceRepository(db))

    def _build_reads(self, business_id: str, period: MonthPeriod) -> Dict[str, Callable]:
        prev_month = period.previous_month()
        prev_year = period.previous_year()
        slots = self.product_slots

        return {
            "defaults": lambda repo: repo.get_business_defaults(business_id),
            "daily": lambda repo: repo.get_daily_totals(business_id, period),
            "invoices": lambda repo: repo.get_invoice_totals(business_id, period),
            "income_sources": lambda repo: repo.get_income_breakdown(business_id, period),
            "products": lambda repo: repo.get_managed_product_usage(business_id, period, limit=slots),
            "goal": lambda repo: repo.get_goal(business_id, period),
            "schedule": lambda repo: repo.get_schedule(business_id),
            "prev_month_daily": lambda repo: repo.get_daily_totals(business_id, prev_month),
            "prev_month_goal": lambda repo: repo.get_goal(business_id, prev_month),
            "prev_year_daily": lambda repo: repo.get_daily_totals(business_id, prev_year),
            "prev_year_goal": lambda repo: repo.get_goal(business_id, prev_year),
        }

    def fetch(self, business_id: str, period: MonthPeriod) -> MonthlyRawData:
        """
        Run every read for the period and its two comparison months.

        All reads are attempted even when one of them fails; errors are
        evaluated only after the pool has drained.

        Raises:
            ConfigurationMissingError: business defaults absent or unreadable
            DataFetchError: a primary-period aggregate could not be read
        """
        reads = self._build_reads(business_id, period)
        results: Dict[str, Any] = {}
        failures: Dict[str, Exception] = {}

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_read = {
                executor.submit(self._read, reader): name
                for name, reader in reads.items()
            }

            for future in as_completed(future_to_read):
                name = future_to_read[future]
                try:
                    results[name] = future.result()
                except Exception as e:
                    failures[name] = e
                    logger.error(
                        f"Read '{name}' failed for business {business_id} {period}: {str(e)}"
                    )

        if "defaults" in failures:
            raise ConfigurationMissingError(
                business_id,
                message=f"Business defaults could not be read for business {business_id}",
            ) from failures["defaults"]
        defaults = results.get("defaults")
        if defaults is None:
            raise ConfigurationMissingError(business_id)

        failed_required = sorted(name for name in failures if name in REQUIRED_READS)
        if failed_required:
            raise DataFetchError(
                f"Required reads failed for business {business_id} {period}",
                source="metrics_source",
                failed_sources=failed_required,
            ) from failures[failed_required[0]]

        for name in sorted(failures):
            logger.warning(f"Optional read '{name}' unavailable, treating as absent")

        return MonthlyRawData(
            business_id=business_id,
            period=period,
            defaults=defaults,
            daily=results["daily"],
            invoices=results["invoices"],
            income_sources=results["income_sources"],
            products=results["products"],
            goal=results.get("goal"),
            schedule=results.get("schedule") or {},
            previous_month=ComparisonRawData(
                period=period.previous_month(),
                daily=results.get("prev_month_daily") or DailyTotals(),
                goal=results.get("prev_month_goal"),
            ),
            previous_year=ComparisonRawData(
                period=period.previous_year(),
                daily=results.get("prev_year_daily") or DailyTotals(),
                goal=results.get("prev_year_goal"),
            ),
        )
