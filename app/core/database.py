import re
from typing import Any, Dict, List, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from app.core.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=10,  # Connection pool size
    max_overflow=20  # Allow up to 20 connections beyond pool_size
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

_POSITIONAL = re.compile(r"\$(\d+)")


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """
    Initialize database.

    Imports the models so their tables are registered on Base.metadata.
    Tables are only created when AUTO_CREATE_TABLES is enabled; otherwise the
    schema is expected to exist already.
    """
    from app.models import company, job  # noqa: F401 - register tables

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=bind or engine)


def query(db: Session, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """
    Execute a statement written with positional placeholders ($1, $2, ...).

    Each $n is bound to values[n - 1]. Returns the result rows as dicts, or an
    empty list for statements that return nothing.

    Example:
        query(db, "SELECT handle FROM companies WHERE handle = $1", ["c1"])
    """
    statement = text(_POSITIONAL.sub(r":p\1", sql))
    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}

    result = db.execute(statement, params)
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings().all()]
