from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE rules unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine; SQLite needs check_same_thread off because FastAPI runs sync routes in a threadpool."""
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(database_url, connect_args=connect_args, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(database_url, pool_pre_ping=True, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create every table known to Base. Alembic owns the schema in production."""
    # Import models so they register on Base.metadata
    from app.models.room import Room  # noqa: F401
    from app.models.tenant import Tenant  # noqa: F401
    from app.models.reading import Reading  # noqa: F401
    from app.models.bill import Bill  # noqa: F401
    from app.models.payment import Payment  # noqa: F401

    Base.metadata.create_all(bind=engine)
