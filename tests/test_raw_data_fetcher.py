from datetime import date
from decimal import Decimal

import pytest

from backoffice.core.exceptions import ConfigurationMissingError, DataFetchError
from backoffice.models import ExpenseType
from backoffice.repositories.analytics import MetricsSourceRepository
from backoffice.services.analytics import RawDataFetcher
from backoffice.utils.date_utils import MonthPeriod

MARCH = MonthPeriod(2026, 3)


def test_aggregates_primary_period(data_source, seed):
    business = seed.business()
    seed.entry(business.id, date(2026, 3, 1), total_register="1000", labor_cost="300",
               labor_hours="8", discounts="20", day_factor="1")
    seed.entry(business.id, date(2026, 3, 31), total_register="500", labor_cost="100",
               labor_hours="4", discounts="5", day_factor="0.5")
    # Outside the period or deleted
    seed.entry(business.id, date(2026, 4, 1), total_register="9999")
    seed.entry(business.id, date(2026, 3, 15), total_register="7777", deleted=True)

    goods = seed.supplier(business.id, ExpenseType.GOODS_PURCHASES.value)
    overhead = seed.supplier(business.id, ExpenseType.CURRENT_EXPENSES.value)
    seed.invoice(business.id, goods, date(2026, 3, 5), "400")
    seed.invoice(business.id, goods, date(2026, 3, 6), "100")
    seed.invoice(business.id, overhead, date(2026, 3, 7), "250")
    seed.invoice(business.id, goods, date(2026, 2, 28), "1000")

    raw = RawDataFetcher(data_source, max_workers=4).fetch(business.id, MARCH)

    assert raw.defaults.vat_percentage == Decimal("0.18")
    assert raw.daily.total_income == Decimal("1500")
    assert raw.daily.total_labor_cost == Decimal("400")
    assert raw.daily.total_labor_hours == Decimal("12")
    assert raw.daily.total_discounts == Decimal("25")
    assert raw.daily.sum_day_factors == Decimal("1.5")
    assert raw.daily.work_days == 2
    assert raw.invoices.food_cost == Decimal("500")
    assert raw.invoices.current_expenses == Decimal("250")
    assert raw.goal is None
    assert raw.schedule == {}


def test_comparison_periods_are_fetched(data_source, seed):
    business = seed.business()
    seed.entry(business.id, date(2026, 2, 10), total_register="2000")
    seed.entry(business.id, date(2025, 3, 10), total_register="3000")
    seed.goal(business.id, 2025, 3, vat_percentage=Decimal("0.17"))

    raw = RawDataFetcher(data_source).fetch(business.id, MARCH)

    assert raw.previous_month.period == MonthPeriod(2026, 2)
    assert raw.previous_month.daily.total_income == Decimal("2000")
    assert raw.previous_year.daily.total_income == Decimal("3000")
    assert raw.previous_year.goal.vat_percentage == Decimal("0.17")


def test_managed_products_first_three_active(data_source, seed):
    business = seed.business()
    entry = seed.entry(business.id, date(2026, 3, 2), total_register="100")
    first = seed.product(business.id, "Milk", "2")
    seed.product(business.id, "Retired", "1", is_active=False)
    second = seed.product(business.id, "Beans", "10")
    third = seed.product(business.id, "Cups", "0.5")
    seed.product(business.id, "Sugar", "1")

    seed.usage(entry, first, opening=10, received=5, closing=3)
    seed.usage(entry, second, opening=4, received=0, closing=1)

    products = RawDataFetcher(data_source).fetch(business.id, MARCH).products

    assert [p.name for p in products] == ["Milk", "Beans", "Cups"]
    assert products[0].quantity == Decimal("12")
    assert products[0].cost == Decimal("24")
    assert products[1].cost == Decimal("30")
    assert products[2].product_id == third.id
    assert products[2].cost == Decimal("0")


def test_missing_business_is_configuration_error(data_source):
    with pytest.raises(ConfigurationMissingError):
        RawDataFetcher(data_source).fetch("no-such-business", MARCH)


def test_required_read_failure_aborts(data_source, seed, monkeypatch):
    business = seed.business()

    def broken(self, business_id, period):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(MetricsSourceRepository, "get_invoice_totals", broken)

    with pytest.raises(DataFetchError) as exc_info:
        RawDataFetcher(data_source).fetch(business.id, MARCH)
    assert exc_info.value.details["failed_sources"] == ["invoices"]


def test_optional_read_failure_is_treated_as_absent(data_source, seed, monkeypatch):
    business = seed.business()
    seed.goal(business.id, 2026, 3, revenue_target=Decimal("5000"))

    def broken(self, business_id, period):
        raise RuntimeError("timeout")

    monkeypatch.setattr(MetricsSourceRepository, "get_goal", broken)

    raw = RawDataFetcher(data_source).fetch(business.id, MARCH)
    assert raw.goal is None
    assert raw.previous_month.goal is None
