import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool, create_engine
from dotenv import load_dotenv

# -------- Load .env and make the project root importable --------
load_dotenv()
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# ALEMBIC_DATABASE_URL lets migrations run as a different (owner) role than the app
if os.getenv("ALEMBIC_DATABASE_URL"):
    os.environ.setdefault("DATABASE_URL", os.environ["ALEMBIC_DATABASE_URL"])
elif config.get_main_option("sqlalchemy.url"):
    os.environ.setdefault("DATABASE_URL", config.get_main_option("sqlalchemy.url"))

# -------- Metadata: Base lives in database.py, tables register via models --------
from settings import settings
from database import Base
import models  # noqa: F401

target_metadata = Base.metadata
resolved_url = os.getenv("ALEMBIC_DATABASE_URL") or settings.DATABASE_URL

# sqlite can't ALTER constraints in place
render_as_batch = resolved_url.startswith("sqlite")


def _configure(**kwargs):
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=render_as_batch,
        **kwargs,
    )


def run_migrations_offline():
    _configure(url=resolved_url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = create_engine(resolved_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
