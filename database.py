# database.py
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from settings import settings  # <-- single source of truth

logger = logging.getLogger("database")

# Use exactly what settings provides (it already loads .env or OS env)
DATABASE_URL = settings.DATABASE_URL

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # FastAPI runs sync endpoints on a threadpool
    connect_args["check_same_thread"] = False

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    future=True,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    logger.debug("Opened DB session")
    try:
        yield db
    finally:
        db.close()
        logger.debug("Closed DB session")


def init_db():
    """Create all tables (dev/test convenience; prod uses Alembic)."""
    import models  # noqa: F401  registers the mappers on Base
    Base.metadata.create_all(bind=engine)
