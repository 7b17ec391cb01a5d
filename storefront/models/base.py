from __future__ import annotations

import re
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

OBJECT_ID_LENGTH = 32
_OBJECT_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def new_object_id() -> str:
    return uuid4().hex


def is_object_id(value: str) -> bool:
    return bool(_OBJECT_ID_PATTERN.match(value or ""))


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class Base(DeclarativeBase):
    pass


class DocumentMixin:
    """Opaque string primary key assigned on insert."""

    id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH), primary_key=True, default=new_object_id
    )


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
