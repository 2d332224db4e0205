"""Base models and mixins for database models"""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import DeclarativeBase, declared_attr
from datetime import datetime, timezone
from typing import List, Type
import enum
import uuid

# Create declarative base
class Base(DeclarativeBase):
    pass

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def generate_id() -> str:
    return str(uuid.uuid4())

def enum_values(enum_cls: Type[enum.Enum]) -> List[str]:
    """Persist enum values rather than member names"""
    return [member.value for member in enum_cls]

class TimestampedModel:
    """Mixin for adding created_at and updated_at timestamps"""

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            default=utcnow,
            index=True
        )

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            default=utcnow,
            onupdate=utcnow
        )

class UUIDModel:
    """Mixin for adding an opaque string primary key"""

    @declared_attr
    def id(cls):
        return Column(
            String(36),
            primary_key=True,
            default=generate_id,
            nullable=False
        )

class SerializableModel:
    """Mixin for a primary-key based repr"""

    def __repr__(self):
        class_name = self.__class__.__name__
        attributes = []

        for column in self.__table__.columns:
            if column.primary_key:
                value = getattr(self, column.name)
                attributes.append(f"{column.name}={value!r}")

        return f"<{class_name}({', '.join(attributes)})>"

__all__ = [
    'Base',
    'TimestampedModel',
    'UUIDModel',
    'SerializableModel',
    'enum_values',
    'generate_id',
    'utcnow',
]
