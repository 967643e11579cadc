import logging
import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from app.config import settings
from app.errors import StorageUnavailableError

logger = logging.getLogger(__name__)

class Base(DeclarativeBase):
    pass

url = settings.database_url or os.getenv("DATABASE_URL", "sqlite:///./markdown-explorer.sqlite")

if url.startswith("postgres://"):
    url = url.replace("postgres://", "postgresql+psycopg://", 1)
elif url.startswith("postgresql://"):
    url = url.replace("postgresql://", "postgresql+psycopg://", 1)

connect_args = {}
if url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    url,
    connect_args=connect_args,
    pool_pre_ping=True,
    future=True,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
)

# Whether the content-group writer may wrap a group and its documents in one
# transaction. Configured explicitly, never derived from the backend name.
supports_transactions: bool = settings.db_transactions


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    if type(dbapi_conn).__module__.startswith("sqlite3"):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(bind: Engine | None = None):
    from app.models import user, content_group, document, summary  # noqa: F401
    try:
        Base.metadata.create_all(bind=bind or engine)
    except OperationalError as e:
        logger.error("Database bootstrap failed: %s", e)
        raise StorageUnavailableError("Database connection failed, please try again later") from e
    logger.info("Database schema ready")
