"""
Database configuration and session management
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi import Request
from typing import Generator
import logging

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Storage handle owning the engine and session factory.

    Constructed once by the application factory and handed to request
    handlers through the ``get_db`` dependency.
    """

    def __init__(self, database_url: str, echo: bool = False):
        if not database_url:
            raise ValueError("DATABASE_URL is not configured")

        self.url = database_url
        self.engine = self._create_engine(database_url, echo)
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )

    @staticmethod
    def _create_engine(database_url: str, echo: bool) -> Engine:
        logger.info(f"Creating database engine for {database_url.split('://')[0]}")

        if database_url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in database_url or database_url in ("sqlite://", "sqlite+pysqlite://"):
                # One shared connection, otherwise every session sees an empty database
                kwargs["poolclass"] = StaticPool
            engine = create_engine(database_url, echo=echo, **kwargs)
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
            return engine

        return create_engine(
            database_url,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            pool_timeout=30,
            pool_recycle=1800,  # Recycle connections after 30 min
            echo=echo,
        )

    def session(self) -> Session:
        """Open a new session bound to this database"""
        return self.session_factory()

    def create_all(self) -> None:
        """Create tables if needed"""
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables initialized")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency function to get database session.
    Use this in FastAPI route dependencies.

    Example:
        @router.get("/comments")
        def list_comments(db: Session = Depends(get_db)):
            return db.query(Comment).all()
    """
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
