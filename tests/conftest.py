import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from backoffice.db.data_source import MetricsDataSource
from backoffice.db.init_db import drop_db, init_db
from backoffice.db.session import build_engine, build_session_factory
from backoffice.models import (
    Business,
    BusinessMember,
    BusinessSchedule,
    DailyEntry,
    DailyIncomeBreakdown,
    DailyProductUsage,
    Goal,
    IncomeSource,
    Invoice,
    ManagedProduct,
    Supplier,
    UserProfile,
)


def _id() -> str:
    return str(uuid4())


class Seeder:
    """Writes upstream records straight through the ORM."""

    def __init__(self, data_source: MetricsDataSource):
        self.data_source = data_source
        self._product_clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _add(self, obj):
        with self.data_source.transaction() as db:
            db.add(obj)
        return obj

    def business(self, **fields) -> Business:
        defaults = dict(
            id=_id(),
            name="Cafe Test",
            vat_percentage=Decimal("0.18"),
            markup_percentage=Decimal("1.0"),
            manager_monthly_salary=Decimal("4400"),
        )
        defaults.update(fields)
        return self._add(Business(**defaults))

    def schedule(self, business_id: str, slots) -> None:
        with self.data_source.transaction() as db:
            for day_of_week, factor in slots.items():
                db.add(BusinessSchedule(
                    business_id=business_id,
                    day_of_week=day_of_week,
                    day_factor=Decimal(str(factor)),
                ))

    def entry(self, business_id: str, entry_date: date, total_register="0", labor_cost="0",
              labor_hours="0", discounts="0", day_factor="1", deleted=False) -> DailyEntry:
        entry = DailyEntry(
            id=_id(),
            business_id=business_id,
            entry_date=entry_date,
            total_register=Decimal(str(total_register)),
            labor_cost=Decimal(str(labor_cost)),
            labor_hours=Decimal(str(labor_hours)),
            discounts=Decimal(str(discounts)),
            day_factor=Decimal(str(day_factor)),
        )
        if deleted:
            entry.soft_delete()
        return self._add(entry)

    def supplier(self, business_id: str, expense_type: str, name="Supplier") -> Supplier:
        return self._add(Supplier(id=_id(), business_id=business_id, name=name, expense_type=expense_type))

    def invoice(self, business_id: str, supplier: Supplier, invoice_date: date, subtotal) -> Invoice:
        return self._add(Invoice(
            id=_id(),
            business_id=business_id,
            supplier_id=supplier.id,
            invoice_date=invoice_date,
            subtotal=Decimal(str(subtotal)),
        ))

    def goal(self, business_id: str, year: int, month: int, **fields) -> Goal:
        return self._add(Goal(id=_id(), business_id=business_id, year=year, month=month, **fields))

    def income_source(self, business_id: str, income_type: str, name="Source", is_active=True) -> IncomeSource:
        return self._add(IncomeSource(
            id=_id(),
            business_id=business_id,
            name=name,
            income_type=income_type,
            is_active=is_active,
        ))

    def income(self, entry: DailyEntry, source: IncomeSource, amount, orders_count: int):
        return self._add(DailyIncomeBreakdown(
            id=_id(),
            daily_entry_id=entry.id,
            income_source_id=source.id,
            amount=Decimal(str(amount)),
            orders_count=orders_count,
        ))

    def product(self, business_id: str, name: str, unit_cost, target_pct=None, is_active=True) -> ManagedProduct:
        self._product_clock += timedelta(minutes=1)
        return self._add(ManagedProduct(
            id=_id(),
            business_id=business_id,
            name=name,
            unit_cost=Decimal(str(unit_cost)),
            target_pct=Decimal(str(target_pct)) if target_pct is not None else None,
            is_active=is_active,
            created_at=self._product_clock,
        ))

    def usage(self, entry: DailyEntry, product: ManagedProduct, opening, received, closing):
        return self._add(DailyProductUsage.record(
            entry.id, product, Decimal(str(opening)), Decimal(str(received)), Decimal(str(closing))
        ))

    def set_unit_cost(self, product: ManagedProduct, unit_cost) -> None:
        with self.data_source.transaction() as db:
            db.get(ManagedProduct, product.id).unit_cost = Decimal(str(unit_cost))

    def profile(self, is_admin=False) -> UserProfile:
        return self._add(UserProfile(id=_id(), email=f"{uuid4().hex}@example.com", is_admin=is_admin))

    def member(self, business_id: str, user_id: str, deleted=False) -> BusinessMember:
        member = BusinessMember(id=_id(), business_id=business_id, user_id=user_id, role="manager")
        if deleted:
            member.soft_delete()
        return self._add(member)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'metrics.db'}")
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def data_source(engine):
    return MetricsDataSource(build_session_factory(engine))


@pytest.fixture
def seed(data_source):
    return Seeder(data_source)
