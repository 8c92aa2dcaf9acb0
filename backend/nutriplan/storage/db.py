from sqlalchemy import text
from sqlmodel import SQLModel, Session, create_engine

from nutriplan.config import settings
from nutriplan.logging import get_logger


engine = create_engine(settings.database_dsn, pool_pre_ping=True)
logger = get_logger(__name__)


def create_db_and_tables() -> None:
    SQLModel.metadata.create_all(engine)


def check_db_connectivity() -> bool:
    """Return True if a simple SELECT 1 succeeds."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("db.connectivity_failed error=%s", e)
        return False


def get_session() -> Session:
    return Session(engine)
