# /course-tracker/course_tracker/db/database.py

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .. import config
from .base_class import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with foreign key enforcement switched off per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **kwargs) -> Engine:
    """
    Creates an engine for `database_url`.

    For SQLite the connection is shared across threads (FastAPI runs sync
    endpoints in a threadpool) and foreign keys are enforced on every
    connection, so cascades and dangling references behave as on PostgreSQL.
    """
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        new_engine = create_engine(database_url, connect_args=connect_args, **kwargs)
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
        return new_engine
    return create_engine(database_url, **kwargs)


engine = build_engine(config.DATABASE_URL)

# Each instance of this class is one request-scoped unit of work.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Creates any missing tables. Deployed databases are migrated with Alembic."""
    # Importing the registry makes every model known to Base.metadata.
    from . import base  # noqa: F401
    Base.metadata.create_all(bind=bind)


# Dependency to get a DB session. This will be used in our API routers.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
