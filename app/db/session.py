"""
Database session management
"""
import logging
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.db.base import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Store client: owns the engine and session factory for one application.

    Built once from explicit settings in create_app() and kept on app.state;
    the engine only opens connections when a session first needs one.

    Usage:
        database = Database(settings)
        with database.session() as db:
            db.query(Employee).all()
    """

    def __init__(self, settings: Settings, engine: Optional[Engine] = None):
        self.settings = settings
        self.engine = engine or self._create_engine(settings.DATABASE_URL)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @staticmethod
    def _create_engine(url: str) -> Engine:
        if url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            # a private in-memory database per connection is useless to a web app
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            engine = create_engine(url, **kwargs)
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
            return engine
        return create_engine(url, pool_pre_ping=True, echo=False)

    def create_all(self) -> None:
        """Create all tables that don't exist yet (SQLite/dev convenience; use Alembic elsewhere)"""
        # Import models so they're registered with Base.metadata
        import app.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Tables ensured on %s", self.engine.dialect.name)

    def session(self) -> Session:
        return self.SessionLocal()
