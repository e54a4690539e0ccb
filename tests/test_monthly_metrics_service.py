import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from backoffice.models import BusinessMonthlyMetrics, ExpenseType
from backoffice.repositories.analytics import MetricsSourceRepository, MonthlyMetricsRepository
from backoffice.schemas.analytics import MonthlyMetricsRow
from backoffice.services.analytics import MonthlyMetricsService, RawDataFetcher
from backoffice.services.base import ErrorCode
from backoffice.utils.date_utils import MonthPeriod


@pytest.fixture
def service(data_source):
    return MonthlyMetricsService(data_source, fetcher=RawDataFetcher(data_source, max_workers=4))


@pytest.fixture
def business(seed):
    return seed.business()


def _stored(data_source, business_id, year, month):
    with data_source.session() as db:
        row = MonthlyMetricsRepository(db).get_by_period(business_id, year, month)
        return MonthlyMetricsRow.model_validate(row) if row is not None else None


def _without_timestamp(row):
    return row.model_dump(exclude={"computed_at"})


def test_labor_cost_scenario(service, seed, business):
    seed.entry(business.id, date(2026, 3, 2), total_register="11800", labor_cost="2000", day_factor="1")

    result = service.refresh_metrics(business.id, 2026, 3)

    assert result.is_success, result.error
    row = result.data
    assert row.income_before_vat == Decimal("10000.00")
    assert row.manager_daily_cost == Decimal("200.00")
    assert row.labor_cost_amount == Decimal("2200.00")
    assert row.labor_cost_pct == Decimal("22.00")
    assert row.expected_work_days == Decimal("22.00")
    assert row.actual_work_days == 1
    assert row.monthly_pace == Decimal("220000.00")
    assert row.vat_pct == Decimal("0.1800")

    stored = _stored(service.data_source, business.id, 2026, 3)
    assert stored.labor_cost_amount == Decimal("2200.00")
    assert stored.computed_at is not None


def test_unset_food_target_nulls_food_diffs(service, seed, business):
    seed.entry(business.id, date(2026, 3, 2), total_register="11800")
    goods = seed.supplier(business.id, ExpenseType.GOODS_PURCHASES.value)
    seed.invoice(business.id, goods, date(2026, 3, 3), "3000")

    row = service.refresh_metrics(business.id, 2026, 3).unwrap()

    assert row.food_cost_amount == Decimal("3000.00")
    assert row.food_cost_pct == Decimal("30.00")
    assert row.food_target_pct == Decimal("0.00")
    assert row.food_diff_pct is None
    assert row.food_diff_amount is None
    assert row.target_diff_pct is None


def test_month_without_records_still_persists(service, business):
    result = service.refresh_metrics(business.id, 2026, 3)

    assert result.is_success
    row = result.data
    assert row.total_income == Decimal("0.00")
    assert row.income_before_vat == Decimal("0.00")
    assert row.monthly_pace == Decimal("0.00")
    assert row.labor_cost_pct == Decimal("0.00")
    assert row.actual_work_days == 0
    assert _stored(service.data_source, business.id, 2026, 3) is not None


def test_empty_previous_month_gives_zero_change(service, seed, business):
    seed.entry(business.id, date(2026, 3, 2), total_register="11800")

    row = service.refresh_metrics(business.id, 2026, 3).unwrap()

    assert row.prev_month_income == Decimal("0.00")
    assert row.prev_month_pace == Decimal("0.00")
    assert row.prev_month_change_pct == Decimal("0.00")


def test_change_against_previous_month(service, seed, business):
    seed.entry(business.id, date(2026, 3, 2), total_register="11800")
    seed.entry(business.id, date(2026, 2, 2), total_register="5900")

    row = service.refresh_metrics(business.id, 2026, 3).unwrap()

    assert row.prev_month_pace == Decimal("110000.00")
    assert row.prev_month_change_pct == Decimal("100.00")


def test_revenue_target_from_goal(service, seed, business):
    seed.entry(business.id, date(2026, 3, 2), total_register="11800")
    seed.goal(business.id, 2026, 3, revenue_target=Decimal("200000"))

    row = service.refresh_metrics(business.id, 2026, 3).unwrap()

    assert row.revenue_target == Decimal("200000.00")
    assert row.target_diff_pct == Decimal("10.00")
    assert row.target_diff_amount == Decimal("909.09")


def test_managed_products_use_stamped_cost(service, seed, business):
    entry = seed.entry(business.id, date(2026, 3, 2), total_register="11800")
    beans = seed.product(business.id, "Beans", "10", target_pct="5")
    milk = seed.product(business.id, "Milk", "2")
    seed.usage(entry, beans, opening=10, received=5, closing=3)
    seed.set_unit_cost(beans, "99")
    seed.goal(business.id, 2026, 3, managed_product_targets={milk.id: 1})

    row = service.refresh_metrics(business.id, 2026, 3).unwrap()

    assert row.managed_product_1_name == "Beans"
    assert row.managed_product_1_cost == Decimal("120.00")
    assert row.managed_product_1_pct == Decimal("1.20")
    assert row.managed_product_1_target_pct == Decimal("5.00")
    assert row.managed_product_1_diff_pct == Decimal("-3.80")
    assert row.managed_product_2_name == "Milk"
    assert row.managed_product_2_cost == Decimal("0.00")
    assert row.managed_product_2_target_pct == Decimal("1.00")
    assert row.managed_product_3_name is None


def test_income_origin_breakdown(service, seed, business):
    entry = seed.entry(business.id, date(2026, 3, 2), total_register="1500")
    walk_in = seed.income_source(business.id, "private", name="Walk-in")
    catering = seed.income_source(business.id, "business", name="Catering")
    seed.income(entry, walk_in, "900", 30)
    seed.income(entry, catering, "600", 4)

    row = service.refresh_metrics(business.id, 2026, 3).unwrap()

    assert row.private_income == Decimal("900.00")
    assert row.private_orders_count == 30
    assert row.private_avg_ticket == Decimal("30.00")
    assert row.business_income == Decimal("600.00")
    assert row.business_avg_ticket == Decimal("150.00")


def test_refresh_is_idempotent(service, seed, business):
    seed.entry(business.id, date(2026, 3, 2), total_register="11800", labor_cost="2000")

    first = service.refresh_metrics(business.id, 2026, 3).unwrap()
    second = service.refresh_metrics(business.id, 2026, 3).unwrap()

    assert _without_timestamp(first) == _without_timestamp(second)
    stored = _stored(service.data_source, business.id, 2026, 3)
    assert _without_timestamp(stored) == _without_timestamp(second)
    with service.data_source.session() as db:
        assert db.query(BusinessMonthlyMetrics).count() == 1


def test_refresh_replaces_previous_row(service, seed, business):
    service.refresh_metrics(business.id, 2026, 3).unwrap()
    seed.entry(business.id, date(2026, 3, 2), total_register="11800")

    service.refresh_metrics(business.id, 2026, 3).unwrap()

    stored = _stored(service.data_source, business.id, 2026, 3)
    assert stored.total_income == Decimal("11800.00")


class _SnapshotFetcher:
    """Returns a fixed snapshot once both refreshes have fetched."""

    def __init__(self, raw, barrier):
        self.raw = raw
        self.barrier = barrier

    def fetch(self, business_id, period):
        self.barrier.wait(timeout=10)
        return self.raw


def test_concurrent_refreshes_never_mix_fields(data_source, seed, business):
    seed.entry(business.id, date(2026, 3, 2), total_register="11800", labor_cost="2000")
    seed.entry(business.id, date(2026, 2, 2), total_register="5900")
    base = RawDataFetcher(data_source, max_workers=4).fetch(business.id, MonthPeriod(2026, 3))
    busier = replace(
        base,
        daily=replace(base.daily, total_income=Decimal("23600"), total_labor_cost=Decimal("3000"),
                      total_discounts=Decimal("40")),
    )

    barrier = threading.Barrier(2)
    services = [
        MonthlyMetricsService(data_source, fetcher=_SnapshotFetcher(raw, barrier))
        for raw in (base, busier)
    ]
    with ThreadPoolExecutor(max_workers=2) as executor:
        results = list(executor.map(lambda svc: svc.refresh_metrics(business.id, 2026, 3), services))

    rows = [result.unwrap() for result in results]
    assert rows[0].total_income != rows[1].total_income
    stored = _without_timestamp(_stored(data_source, business.id, 2026, 3))
    assert stored in [_without_timestamp(row) for row in rows]


def test_malformed_product_target_keeps_rest_of_goal(service, seed, business):
    seed.entry(business.id, date(2026, 3, 2), total_register="11000")
    milk = seed.product(business.id, "Milk", "2")
    seed.goal(business.id, 2026, 3, vat_percentage=Decimal("0.10"),
              managed_product_targets={"retired-product": "n/a", milk.id: 3})

    row = service.refresh_metrics(business.id, 2026, 3).unwrap()

    assert row.vat_pct == Decimal("0.1000")
    assert row.income_before_vat == Decimal("10000.00")
    assert row.managed_product_1_name == "Milk"
    assert row.managed_product_1_target_pct == Decimal("3.00")


def test_missing_business_defaults(service):
    result = service.refresh_metrics("unknown-business", 2026, 3)

    assert not result.is_success
    assert result.error.code == ErrorCode.MISSING_CONFIGURATION


@pytest.mark.parametrize("year,month", [(2026, 0), (2026, 13), (1999, 5), (2101, 1)])
def test_invalid_period(service, business, year, month):
    result = service.refresh_metrics(business.id, year, month)

    assert not result.is_success
    assert result.error.code == ErrorCode.VALIDATION_ERROR


def test_read_failure_writes_nothing(service, business, monkeypatch):
    def broken(self, business_id, period):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(MetricsSourceRepository, "get_daily_totals", broken)

    result = service.refresh_metrics(business.id, 2026, 3)

    assert result.error.code == ErrorCode.EXTERNAL_SERVICE_ERROR
    assert _stored(service.data_source, business.id, 2026, 3) is None


def test_persistence_failure(service, business, monkeypatch):
    def broken(self, values):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(MonthlyMetricsRepository, "upsert", broken)

    result = service.refresh_metrics(business.id, 2026, 3)

    assert result.error.code == ErrorCode.INTERNAL_ERROR
    assert result.error.details["error_code"] == "PERSISTENCE_FAILED"


def test_get_metrics(service, business):
    assert service.get_metrics(business.id, 2026, 3).error.code == ErrorCode.NOT_FOUND

    service.refresh_metrics(business.id, 2026, 3).unwrap()
    row = service.get_metrics(business.id, 2026, 3).unwrap()

    assert row.business_id == business.id
    assert row.year == 2026
    assert row.month == 3
