"""Base factory configuration for polyfactory."""

from uuid import uuid4

from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory

from src.workflow_alerts.models.base import utc_now


def generate_uuid():
    """Generate UUID4 for primary keys."""
    return uuid4()


def short_token() -> str:
    return uuid4().hex[:8]


class BaseFactory(SQLAlchemyFactory):
    """Base factory with common configuration for all models.

    Provides:
    - UUID generation for primary keys
    - UTC timestamp generation
    - Disabled auto-relationship setting (steps and sub-tasks are attached explicitly)
    """

    __is_base_factory__ = True
    __set_relationships__ = False
    __set_foreign_keys__ = False  # We set FK values explicitly


__all__ = ["BaseFactory", "generate_uuid", "short_token", "utc_now"]
