#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the credential service.

- Integer autoincrement primary key
- created_at timestamp, set by the application clock so token lifetimes can
  be computed exactly from it; the DB default is only a fallback

Notes:
- Timestamps are stored as naive UTC; SQLite drops tz info anyway.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the storage convention."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel:
    """
    Base mixin for all persistent models: id and created_at.
    Secrets (password_hash, token_hash) live on the subclasses and are only
    ever serialized through the marshmallow schemas, which leave them out.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=utcnow, server_default=func.now(), nullable=False)

    def __init__(self, *args, **kwargs):
        """Allow attribute initialization via kwargs without requiring a session here."""
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)

    def __str__(self) -> str:
        return f"[{self.__class__.__name__}] ({self.id})"
