"""
Expected work days for a calendar month from the weekly schedule.
"""

from decimal import Decimal
from typing import Mapping, Optional

from backoffice.config import settings
from backoffice.core.logging import get_logger
from backoffice.utils.date_utils import MonthPeriod, schedule_weekday

logger = get_logger(__name__)


class WorkScheduleCalculator:
    """
    Projects the number of (weighted) operating days in a month.

    Each calendar day contributes the day factor of its weekday slot;
    weekdays without a slot contribute nothing. A business with no
    schedule at all falls back to a constant month length.
    """

    def __init__(self, fallback_days: Optional[int] = None):
        if fallback_days is None:
            fallback_days = settings.DEFAULT_EXPECTED_WORK_DAYS
        self.fallback_days = Decimal(fallback_days)

    def expected_work_days(self, schedule: Mapping[int, Decimal], period: MonthPeriod) -> Decimal:
        if not schedule:
            logger.info(
                f"No schedule configured, using {self.fallback_days} expected work days for {period}"
            )
            return self.fallback_days

        return sum(
            (Decimal(str(schedule.get(schedule_weekday(day), 0))) for day in period.days()),
            Decimal("0"),
        )
