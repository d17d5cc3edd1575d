from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from ticket_api.core.settings import settings
from ticket_api.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def run_migrations() -> None:
    url = settings.DATABASE_URL
    connectable = create_engine(url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=Base.metadata,
            compare_type=True,
            # SQLite can only alter tables by copying them.
            render_as_batch=url.startswith("sqlite"),
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    raise RuntimeError("Offline (--sql) migrations are not supported; run against DATABASE_URL")

run_migrations()
