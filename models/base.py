"""
Defines a base model for SQLAlchemy ORM with common attributes.

This module provides a base class for SQLAlchemy models, including standard
attributes for identifying and timestamping database records. Records get an
autoincrementing integer key and a creation timestamp; rows are append-only,
so there is no modification timestamp.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class BaseModel(Base):
    """
    Base model class for database entities.

    :ivar id: Server-assigned, monotonically increasing identifier.
    :type id: int
    :ivar created_at: Timestamp representing when the record was inserted.
    :type created_at: datetime
    """
    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
