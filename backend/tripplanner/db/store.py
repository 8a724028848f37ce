"""
Data-access handle for trips, days and their children.

Every query goes through TripStore so driver errors are classified once:
a missing table/view becomes SchemaMismatch, anything else StorageError.
"""
import logging
import re
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, text, bindparam
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from tripplanner.core.errors import NotFoundError, SchemaMismatch, StorageError
from tripplanner.core.utils import to_money
from tripplanner.db.views import DAY_TOTALS_VIEW, TRIP_TOTALS_VIEW
from tripplanner.models.trip import Trip
from tripplanner.models.itinerary import DayItinerary
from tripplanner.models.location import Location
from tripplanner.models.photo import Photo
from tripplanner.models.expense import Expense

logger = logging.getLogger(__name__)

# PostgreSQL undefined_table, MySQL ER_NO_SUCH_TABLE
UNDEFINED_TABLE_SQLSTATE = "42P01"
MYSQL_NO_SUCH_TABLE = 1146

_MISSING_RELATION_RE = re.compile(
    r"no such table|relation \S+ does not exist|table \S+ doesn't exist",
    re.IGNORECASE,
)

DAY_LIMIT = 100


def _as_date(value) -> date:
    # SQLite returns view date columns as text
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    return value


def is_missing_relation(exc: Exception) -> bool:
    """True when a driver error means the queried table or view does not exist."""
    orig = getattr(exc, "orig", None) or exc
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == UNDEFINED_TABLE_SQLSTATE:
        return True
    args = getattr(orig, "args", ())
    if args and args[0] == MYSQL_NO_SUCH_TABLE:
        return True
    return bool(_MISSING_RELATION_RE.search(str(orig)))


class TripStore:
    """Thin query layer over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, relation: str):
        try:
            yield
        except DBAPIError as exc:
            self.db.rollback()
            if is_missing_relation(exc):
                logger.info(f"Relation {relation} is not available: {exc.orig}")
                raise SchemaMismatch(relation, str(exc.orig)) from exc
            logger.error(f"Query on {relation} failed: {exc}")
            raise StorageError(str(exc.orig), relation=relation) from exc

    # Generic writes

    def save(self, obj):
        """Insert or update a row and commit."""
        with self._guard(obj.__tablename__):
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        return obj

    def delete(self, obj):
        """Delete a row and commit."""
        with self._guard(obj.__tablename__):
            self.db.delete(obj)
            self.db.commit()

    def commit(self):
        with self._guard("session"):
            self.db.commit()

    # Trips

    def list_trips(self, user_id: int) -> List[Trip]:
        with self._guard("trips"):
            return self.db.query(Trip).filter(
                Trip.user_id == user_id
            ).order_by(Trip.created_at.desc(), Trip.id.desc()).all()

    def get_trip(self, trip_id: int) -> Trip:
        with self._guard("trips"):
            trip = self.db.query(Trip).filter(Trip.id == trip_id).first()
        if not trip:
            raise NotFoundError("Trip", trip_id)
        return trip

    # Days

    def get_day(self, day_id: int) -> DayItinerary:
        with self._guard("day_itineraries"):
            day = self.db.query(DayItinerary).filter(DayItinerary.id == day_id).first()
        if not day:
            raise NotFoundError("Day itinerary", day_id)
        return day

    def find_day(self, trip_id: int, day_date: date) -> Optional[DayItinerary]:
        with self._guard("day_itineraries"):
            return self.db.query(DayItinerary).filter(
                DayItinerary.trip_id == trip_id,
                DayItinerary.date == day_date
            ).first()

    def list_days(self, trip_id: int, limit: int = DAY_LIMIT) -> List[DayItinerary]:
        with self._guard("day_itineraries"):
            return self.db.query(DayItinerary).filter(
                DayItinerary.trip_id == trip_id
            ).order_by(DayItinerary.date.asc()).limit(limit).all()

    def day_ids_for_trip(self, trip_id: int) -> List[int]:
        with self._guard("day_itineraries"):
            rows = self.db.query(DayItinerary.id).filter(
                DayItinerary.trip_id == trip_id
            ).all()
        return [row[0] for row in rows]

    def day_trip_map(self, trip_ids: Iterable[int]) -> Dict[int, int]:
        """Map day id -> trip id for every day of the given trips."""
        trip_ids = list(trip_ids)
        if not trip_ids:
            return {}
        with self._guard("day_itineraries"):
            rows = self.db.query(DayItinerary.id, DayItinerary.trip_id).filter(
                DayItinerary.trip_id.in_(trip_ids)
            ).all()
        return {day_id: trip_id for day_id, trip_id in rows}

    def trip_id_for_day(self, day_id: int) -> int:
        with self._guard("day_itineraries"):
            row = self.db.query(DayItinerary.trip_id).filter(DayItinerary.id == day_id).first()
        if not row:
            raise NotFoundError("Day itinerary", day_id)
        return row[0]

    def insert_day(self, trip_id: int, day_date: date, notes: Optional[str] = None) -> Optional[DayItinerary]:
        """Insert a day; None when another writer already holds (trip_id, date)."""
        day = DayItinerary(trip_id=trip_id, date=day_date, notes=notes)
        with self._guard("day_itineraries"):
            self.db.add(day)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.info(f"Day {day_date} of trip {trip_id} was created concurrently")
                return None
            self.db.refresh(day)
        return day

    # Children

    def locations_for_days(self, day_ids: List[int]) -> List[Location]:
        if not day_ids:
            return []
        with self._guard("locations"):
            return self.db.query(Location).filter(
                Location.day_itinerary_id.in_(day_ids)
            ).order_by(Location.order_index.asc(), Location.id.asc()).all()

    def get_location(self, location_id: int) -> Location:
        with self._guard("locations"):
            location = self.db.query(Location).filter(Location.id == location_id).first()
        if not location:
            raise NotFoundError("Location", location_id)
        return location

    def max_order_index(self, day_id: int) -> Optional[int]:
        with self._guard("locations"):
            return self.db.query(func.max(Location.order_index)).filter(
                Location.day_itinerary_id == day_id
            ).scalar()

    def photos_for_days(self, trip_id: int, day_ids: List[int]) -> List[Photo]:
        if not day_ids:
            return []
        with self._guard("photos"):
            return self.db.query(Photo).filter(
                Photo.trip_id == trip_id,
                Photo.day_itinerary_id.in_(day_ids)
            ).order_by(Photo.created_at.desc(), Photo.id.desc()).all()

    def photos_for_trip(self, trip_id: int, day_id: Optional[int] = None) -> List[Photo]:
        with self._guard("photos"):
            query = self.db.query(Photo).filter(Photo.trip_id == trip_id)
            if day_id is not None:
                query = query.filter(Photo.day_itinerary_id == day_id)
            return query.order_by(Photo.created_at.desc(), Photo.id.desc()).all()

    def get_photo(self, photo_id: int) -> Photo:
        with self._guard("photos"):
            photo = self.db.query(Photo).filter(Photo.id == photo_id).first()
        if not photo:
            raise NotFoundError("Photo", photo_id)
        return photo

    def expenses_for_days(self, day_ids: List[int]) -> List[Expense]:
        if not day_ids:
            return []
        with self._guard("expenses"):
            return self.db.query(Expense).filter(
                Expense.day_itinerary_id.in_(day_ids)
            ).order_by(Expense.created_at.desc(), Expense.id.desc()).all()

    def expense_amounts_for_days(self, day_ids: List[int]) -> List[Tuple[int, Decimal]]:
        """(day id, amount) pairs; lighter than loading full rows."""
        if not day_ids:
            return []
        with self._guard("expenses"):
            rows = self.db.query(Expense.day_itinerary_id, Expense.amount).filter(
                Expense.day_itinerary_id.in_(day_ids)
            ).all()
        return [(day_id, to_money(amount)) for day_id, amount in rows]

    def get_expense(self, expense_id: int) -> Expense:
        with self._guard("expenses"):
            expense = self.db.query(Expense).filter(Expense.id == expense_id).first()
        if not expense:
            raise NotFoundError("Expense", expense_id)
        return expense

    # Aggregate views

    def day_totals(self, day_ids: List[int]) -> Dict[int, Decimal]:
        """Read day_totals for the given days; raises SchemaMismatch without the view."""
        if not day_ids:
            return {}
        statement = text(
            f"SELECT day_itinerary_id, day_total FROM {DAY_TOTALS_VIEW} "
            "WHERE day_itinerary_id IN :day_ids"
        ).bindparams(bindparam("day_ids", expanding=True))
        with self._guard(DAY_TOTALS_VIEW):
            rows = self.db.execute(statement, {"day_ids": list(day_ids)}).all()
        return {row[0]: to_money(row[1]) for row in rows}

    def day_total_rows(self, trip_id: int) -> List[dict]:
        """All day_totals rows of a trip ordered by date."""
        statement = text(
            f"SELECT day_itinerary_id, trip_id, date, day_total FROM {DAY_TOTALS_VIEW} "
            "WHERE trip_id = :trip_id ORDER BY date ASC"
        )
        with self._guard(DAY_TOTALS_VIEW):
            rows = self.db.execute(statement, {"trip_id": trip_id}).mappings().all()
        return [
            {
                "day_itinerary_id": row["day_itinerary_id"],
                "trip_id": row["trip_id"],
                "date": _as_date(row["date"]),
                "day_total": to_money(row["day_total"]),
            }
            for row in rows
        ]

    def trip_totals(self, trip_ids: List[int]) -> Dict[int, Decimal]:
        """Read trip_totals for the given trips; raises SchemaMismatch without the view."""
        if not trip_ids:
            return {}
        statement = text(
            f"SELECT trip_id, total_expenses FROM {TRIP_TOTALS_VIEW} "
            "WHERE trip_id IN :trip_ids"
        ).bindparams(bindparam("trip_ids", expanding=True))
        with self._guard(TRIP_TOTALS_VIEW):
            rows = self.db.execute(statement, {"trip_ids": list(trip_ids)}).all()
        return {row[0]: to_money(row[1]) for row in rows}
