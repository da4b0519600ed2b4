import logging

from database import Base, engine, init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("crowdsolve.recreate_db")

if __name__ == "__main__":
    logger.info("Dropping database tables...")
    import models  # noqa: F401
    Base.metadata.drop_all(bind=engine)
    logger.info("Creating database tables...")
    init_db()
    logger.info("Database tables created successfully!")
