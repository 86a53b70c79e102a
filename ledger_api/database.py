from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from ledger_api.config import settings


def _create_engine() -> Engine:
    if settings.is_sqlite:
        eng = create_engine(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
            connect_args={"check_same_thread": False},
        )
        event.listen(eng, "connect", _enable_sqlite_foreign_keys)
        return eng

    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        echo=settings.DEBUG,  # Log SQL queries in debug mode
    )


def _enable_sqlite_foreign_keys(dbapi_conn, _record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON;")
    cursor.close()


engine = _create_engine()

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.

    Usage:
        @router.get("/payees")
        def list_payees(db: Session = Depends(get_db)):
            return PayeeService(db).get_payees(user)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ping() -> None:
    """Run a trivial query so startup fails fast on a bad DATABASE_URL."""
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
