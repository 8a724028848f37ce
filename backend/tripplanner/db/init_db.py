"""
Database initialization script.
"""
import logging
import sys
from tripplanner.db.session import init_db

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    with_views = "--no-views" not in sys.argv
    logger.info("Initializing database...")
    init_db(with_views=with_views)
    logger.info("Database initialized successfully!")
