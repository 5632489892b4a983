"""Declarative base with deterministic constraint names.

Named constraints keep Alembic revisions stable across PostgreSQL and the
SQLite databases used in tests.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for the question pool tables."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
