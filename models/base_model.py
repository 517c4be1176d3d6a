#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the Reading Club API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at timestamps, stored as naive UTC

Timestamps are set from Python (utcnow) rather than the database clock so that
expiry comparisons made in Python and in SQL agree.
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base

TIME_FMT = "%Y-%m-%dT%H:%M:%S"

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


class BaseModel:
    """
    Base mixin for all persistent models: id, created_at, updated_at.
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __str__(self) -> str:
        return f"[{self.__class__.__name__}] ({self.id}) {self.__dict__}"
