"""
Read-only aggregate views over expenses.

Both views are optional: a deployment may not have them, and every reader
must fall back to summing the base tables.
"""
import logging
from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

DAY_TOTALS_VIEW = "day_totals"
TRIP_TOTALS_VIEW = "trip_totals"

DAY_TOTALS_SQL = f"""
CREATE VIEW {DAY_TOTALS_VIEW} AS
SELECT d.id AS day_itinerary_id,
       d.trip_id AS trip_id,
       d.date AS date,
       COALESCE(SUM(e.amount), 0) AS day_total
FROM day_itineraries d
LEFT JOIN expenses e ON e.day_itinerary_id = d.id
GROUP BY d.id, d.trip_id, d.date
"""

TRIP_TOTALS_SQL = f"""
CREATE VIEW {TRIP_TOTALS_VIEW} AS
SELECT t.id AS trip_id,
       COALESCE(SUM(e.amount), 0) AS total_expenses
FROM trips t
LEFT JOIN day_itineraries d ON d.trip_id = t.id
LEFT JOIN expenses e ON e.day_itinerary_id = d.id
GROUP BY t.id
"""


def create_aggregate_views(engine: Engine):
    """Create day_totals and trip_totals (replacing existing ones)."""
    drop_aggregate_views(engine)
    with engine.begin() as conn:
        conn.execute(text(DAY_TOTALS_SQL))
        conn.execute(text(TRIP_TOTALS_SQL))
    logger.info(f"Created aggregate views {DAY_TOTALS_VIEW}, {TRIP_TOTALS_VIEW}")


def drop_aggregate_views(engine: Engine):
    """Drop the aggregate views if present."""
    with engine.begin() as conn:
        conn.execute(text(f"DROP VIEW IF EXISTS {TRIP_TOTALS_VIEW}"))
        conn.execute(text(f"DROP VIEW IF EXISTS {DAY_TOTALS_VIEW}"))
