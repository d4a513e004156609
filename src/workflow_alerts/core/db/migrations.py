"""Reusable migration runner for both production and tests."""

from alembic import command
from alembic.config import Config


def run_migrations_sync() -> None:
    """Run Alembic migrations synchronously up to head.

    Alembic drives its own sync engine; from async code call this through
    ``asyncio.to_thread``.
    """
    command.upgrade(Config("alembic.ini"), "head")
