from __future__ import annotations

from typing import Optional

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, DocumentMixin


class Category(DocumentMixin, Base):
    __tablename__ = "categories"

    name: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    subcategories: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
