from __future__ import annotations

from typing import Optional

from sqlalchemy import Float, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, DocumentMixin

MUTABLE_FIELDS = (
    "name",
    "code",
    "price",
    "categories",
    "images",
    "more_details",
    "reviews",
    "shipping_time",
    "url",
)


class Product(DocumentMixin, Base):
    __tablename__ = "products"

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    code: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    categories: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    more_details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviews: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    shipping_time: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
