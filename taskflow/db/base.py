"""
SQLAlchemy declarative base.

All models inherit from this Base class so their tables share one metadata.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass
