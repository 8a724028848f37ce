"""
Calendar day expansion for trip itineraries.
"""
import logging
import warnings
from datetime import date as dt_date, timedelta
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from tripplanner.core.config import settings
from tripplanner.core.errors import DurationExceeded, InvalidDateRange, TripValidationError
from tripplanner.models.trip import TripStatus

logger = logging.getLogger(__name__)


class TripDay(BaseModel):
    """One calendar day of a trip, numbered from 1."""
    model_config = ConfigDict(frozen=True)

    day_number: int
    date: dt_date

    @property
    def iso_date(self) -> str:
        return self.date.isoformat()


class TripDayRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    days: List[TripDay] = []
    total_days: int = 0
    truncated: bool = False


def trip_duration(start: dt_date, end: dt_date) -> int:
    """Inclusive number of calendar days from start to end."""
    return (end - start).days + 1


def expand_date_range(
    start: dt_date, end: dt_date, max_days: Optional[int] = None, warn: bool = True
) -> TripDayRange:
    """
    Expand an inclusive date range into numbered trip days.

    Raises InvalidDateRange when end is before start. Spans longer than
    max_days are cut to the first max_days days and, unless warn is False,
    a DurationExceeded warning is emitted; the truncated range is still
    returned with truncated=True.
    """
    if max_days is None:
        max_days = settings.MAX_TRIP_DAYS
    if end < start:
        raise InvalidDateRange(
            f"Trip has an invalid duration (end date {end} is before start date {start})"
        )

    total_days = trip_duration(start, end)
    truncated = total_days > max_days
    if truncated:
        logger.warning(f"Trip duration ({total_days}) exceeds maximum allowed ({max_days})")
        if warn:
            warnings.warn(
                f"Trip duration of {total_days} days exceeds {max_days}; showing the first {max_days} days",
                DurationExceeded,
                stacklevel=2,
            )

    # date arithmetic has no time component, so no timezone drift
    days = [
        TripDay(day_number=offset + 1, date=start + timedelta(days=offset))
        for offset in range(min(total_days, max_days))
    ]
    return TripDayRange(days=days, total_days=total_days, truncated=truncated)


def validate_trip_dates(start: dt_date, end: dt_date, max_days: Optional[int] = None):
    """Validate trip dates before anything is written."""
    if max_days is None:
        max_days = settings.MAX_TRIP_DAYS
    if start > end:
        raise TripValidationError("End date must be on or after start date")
    if trip_duration(start, end) > max_days:
        raise TripValidationError(f"Trip duration cannot exceed {max_days} days")


def derive_trip_status(start: dt_date, end: dt_date, today: Optional[dt_date] = None) -> TripStatus:
    """Status implied by today's date relative to the trip dates."""
    today = today or dt_date.today()
    if start > today:
        return TripStatus.PLANNING
    if end < today:
        return TripStatus.COMPLETED
    return TripStatus.ONGOING
