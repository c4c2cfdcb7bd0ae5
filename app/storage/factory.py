import logging
from typing import Callable

from app.core.config import Settings
from app.core.database import build_engine, build_session_factory, init_db
from app.storage.base import RentalStore
from app.storage.local import LocalRentalStore
from app.storage.sql import SqlRentalStore

logger = logging.getLogger(__name__)

StoreFactory = Callable[[], RentalStore]


def build_store_factory(settings: Settings) -> StoreFactory:
    """
    Pick the storage backend once, from configuration.
    Demo mode shares one LocalRentalStore; the database backend hands out one
    SqlRentalStore (one Session) per call.
    """
    if settings.is_demo_mode:
        store = LocalRentalStore(settings.DEMO_DATA_DIR)
        logger.info("Demo mode: using local JSON store in %s", settings.DEMO_DATA_DIR)
        return lambda: store

    if not settings.database_url:
        raise RuntimeError("DATABASE_URL is required when DEMO_MODE is off in production")
    engine = build_engine(settings.database_url)
    if settings.AUTO_CREATE_TABLES:
        init_db(engine)
    session_factory = build_session_factory(engine)
    logger.info("Production mode: using database store (%s)", engine.url.get_backend_name())
    return lambda: SqlRentalStore(session_factory())
