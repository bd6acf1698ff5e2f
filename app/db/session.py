from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from app.core.config import settings

# The engine handles connection pooling for the configured database URL.
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

# One session per request; enquiry writes commit explicitly.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # Always release the connection, even if the endpoint raised.
        db.close()


@contextmanager
def statement_timeout(db: Session, timeout_ms: Optional[int]):
    """
    Run the block in a SAVEPOINT on Postgres, bounding its queries by
    `timeout_ms` when one is given. A no-op on other databases.

    A failed statement inside the block only rolls back the savepoint, so the
    caller's transaction stays usable.
    """
    if db.get_bind().dialect.name != "postgresql":
        yield
        return
    with db.begin_nested():
        if timeout_ms:
            db.execute(text(f"SET LOCAL statement_timeout = {int(timeout_ms)}"))
        yield
        if timeout_ms:
            db.execute(text("SET LOCAL statement_timeout TO DEFAULT"))
