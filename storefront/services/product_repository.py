"""Persistence for product documents."""

import logging
from typing import Any, NoReturn

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.models import Product, is_object_id, new_object_id
from . import exceptions

logger = logging.getLogger(__name__)


class ProductRepository:
    """Single-collection access to ``products``.

    ``NotFoundError`` means a well-formed id matched no row. Malformed ids and
    database failures raise ``PersistenceError``.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert(self, data: dict[str, Any]) -> str:
        product = Product(id=new_object_id(), **data)
        try:
            self.db.add(product)
            self.db.commit()
        except SQLAlchemyError as exc:
            self._fail("insert", exc)
        return product.id

    def find_all(self) -> list[Product]:
        """Return every product in the table's natural order (insertion order not guaranteed)."""
        try:
            return list(self.db.scalars(select(Product).execution_options(populate_existing=True)))
        except SQLAlchemyError as exc:
            self._fail("find_all", exc)

    def find_by_id(self, product_id: str) -> Product:
        self._check_id(product_id)
        try:
            product = self.db.get(Product, product_id, populate_existing=True)
        except SQLAlchemyError as exc:
            self._fail("find_by_id", exc)
        if product is None:
            raise exceptions.NotFoundError("Product not found")
        return product

    def update_in_place(self, product_id: str, fields: dict[str, Any]) -> Product:
        """Write ``fields`` onto the row with one conditional UPDATE.

        Columns not named in ``fields`` are never written, so concurrent
        updates touching different fields do not overwrite each other.
        """
        self._check_id(product_id)
        if not fields:
            return self.find_by_id(product_id)
        statement = (
            update(Product)
            .where(Product.id == product_id)
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(statement)
            if result.rowcount == 0:
                self.db.rollback()
                raise exceptions.NotFoundError("Product not found")
            self.db.commit()
        except SQLAlchemyError as exc:
            self._fail("update_in_place", exc)
        return self.find_by_id(product_id)

    def delete_by_id(self, product_id: str) -> Product:
        product = self.find_by_id(product_id)
        try:
            self.db.delete(product)
            self.db.commit()
        except SQLAlchemyError as exc:
            self._fail("delete_by_id", exc)
        return product

    @staticmethod
    def _check_id(product_id: str) -> None:
        if not is_object_id(product_id):
            raise exceptions.PersistenceError(f"Malformed product id: {product_id!r}")

    def _fail(self, operation: str, exc: SQLAlchemyError) -> NoReturn:
        self.db.rollback()
        logger.error("Product %s failed: %s", operation, exc)
        raise exceptions.PersistenceError(str(exc)) from exc
