"""
Database session management.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from tripplanner.core.config import settings
from tripplanner.db.base import Base
from tripplanner.db.views import create_aggregate_views

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_pre_ping=True,
    pool_recycle=3600
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(with_views: bool = None):
    """Initialize database tables and, if enabled, the aggregate views."""
    import tripplanner.models  # noqa: F401  register models on Base.metadata

    Base.metadata.create_all(bind=engine)
    if with_views is None:
        with_views = settings.CREATE_AGGREGATE_VIEWS
    if with_views:
        create_aggregate_views(engine)
