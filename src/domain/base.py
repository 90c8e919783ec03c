"""Shared base for domain entities"""

from datetime import datetime, timezone
from enum import Enum
from typing import Type
from uuid import uuid4
from sqlalchemy import Column, DateTime, Enum as SAEnum
from sqlmodel import SQLModel


def generate_uuid() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    """Naive UTC timestamp; every datetime in the engine is naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def enum_column(enum_cls: Type[Enum], **kwargs) -> Column:
    """String-backed enum column that stores member values (not names)."""
    return Column(
        SAEnum(
            enum_cls,
            values_callable=lambda members: [m.value for m in members],
            native_enum=False,
            length=20,
        ),
        **kwargs,
    )


def naive_utc_column(**kwargs) -> Column:
    """Timezone-naive DateTime column; values are UTC by convention."""
    return Column(DateTime(timezone=False), **kwargs)


class BaseModel(SQLModel):
    pass
