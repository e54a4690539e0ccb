"""
Monthly metrics repository: full-row upsert and keyed reads of
business_monthly_metrics.
"""

from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from backoffice.core.logging import get_logger
from backoffice.models import BusinessMonthlyMetrics
from backoffice.repositories.base.base_repository import BaseRepository

logger = get_logger(__name__)

KEY_COLUMNS = ("business_id", "year", "month")

_INSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class MonthlyMetricsRepository(BaseRepository[BusinessMonthlyMetrics]):
    """Persistence for the derived monthly metrics row."""

    def __init__(self, db: Session):
        super().__init__(BusinessMonthlyMetrics, db)

    def upsert(self, values: Dict[str, Any]) -> None:
        """
        Insert the row or replace every non-key column of the existing row
        in a single statement keyed on (business_id, year, month).

        Args:
            values: Complete column -> value mapping, key columns included
        """
        dialect = self.db.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Upsert not supported for dialect '{dialect}'")

        stmt = insert(BusinessMonthlyMetrics).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(KEY_COLUMNS),
            set_={
                column: stmt.excluded[column]
                for column in values
                if column not in KEY_COLUMNS and column != "id"
            },
        )
        self.db.execute(stmt)
        logger.debug(
            "Upserted monthly metrics row",
            extra={key: values.get(key) for key in KEY_COLUMNS},
        )

    def get_by_period(self, business_id: str, year: int, month: int) -> Optional[BusinessMonthlyMetrics]:
        stmt = select(BusinessMonthlyMetrics).where(
            BusinessMonthlyMetrics.business_id == business_id,
            BusinessMonthlyMetrics.year == year,
            BusinessMonthlyMetrics.month == month,
        )
        return self.db.execute(stmt).scalar_one_or_none()
