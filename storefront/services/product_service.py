from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from sqlalchemy.orm import Session

from storefront.models import PRODUCT_MUTABLE_FIELDS, Product

from . import exceptions
from .product_repository import ProductRepository

if TYPE_CHECKING:  # pragma: no cover
    from storefront.core.storage import ImageStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_IMAGES = 10

Upload = tuple[str, bytes]


def merge_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Keep the mutable fields whose incoming value is truthy.

    ``None``, ``""``, ``0`` and ``[]`` fall back to the stored value, so they
    can never clear a field through this path.
    """
    return {key: value for key, value in data.items() if key in PRODUCT_MUTABLE_FIELDS and value}


def explicit_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Keep every mutable field the caller sent; ``None`` clears it."""
    fields = {key: value for key, value in data.items() if key in PRODUCT_MUTABLE_FIELDS}
    if "images" in fields and fields["images"] is None:
        fields["images"] = []
    return fields


class ProductService:
    def __init__(
        self,
        db: Session,
        image_store: ImageStore | None = None,
        *,
        max_images: int = DEFAULT_MAX_IMAGES,
    ):
        self.db = db
        self.repository = ProductRepository(db)
        self.image_store = image_store
        self.max_images = max_images

    def list_products(self) -> list[Product]:
        return self.repository.find_all()

    def get_product(self, product_id: str) -> Product:
        return self.repository.find_by_id(product_id)

    def create_product(self, *, data: dict[str, Any], uploads: Sequence[Upload] = ()) -> Product:
        if len(uploads) > self.max_images:
            raise exceptions.ValidationFailure(
                f"At most {self.max_images} images can be uploaded per product"
            )
        images = self._store_uploads(uploads)
        fields = {key: value for key, value in data.items() if key in PRODUCT_MUTABLE_FIELDS}
        fields["images"] = images
        try:
            product_id = self.repository.insert(fields)
        except exceptions.PersistenceError:
            self._discard_uploads(images)
            raise
        logger.info("Product %s created with %d image(s)", product_id, len(images))
        return self.repository.find_by_id(product_id)

    def update_product(self, *, product_id: str, data: dict[str, Any]) -> Product:
        fields = merge_fields(data)
        product = self.repository.update_in_place(product_id, fields)
        if fields:
            logger.info("Product %s updated fields=%s", product_id, sorted(fields))
        return product

    def patch_product(self, *, product_id: str, data: dict[str, Any]) -> Product:
        fields = explicit_fields(data)
        product = self.repository.update_in_place(product_id, fields)
        if fields:
            logger.info("Product %s patched fields=%s", product_id, sorted(fields))
        return product

    def delete_product(self, *, product_id: str) -> Product:
        product = self.repository.delete_by_id(product_id)
        logger.info("Product %s deleted", product_id)
        return product

    def _store_uploads(self, uploads: Iterable[Upload]) -> list[str]:
        uploads = list(uploads)
        if not uploads:
            return []
        if self.image_store is None:
            raise exceptions.StorageUnavailable("Image storage is not configured")
        images: list[str] = []
        try:
            for file_name, contents in uploads:
                images.append(self.image_store.store(contents, file_name))
        except exceptions.StorageUnavailable:
            self._discard_uploads(images)
            raise
        return images

    def _discard_uploads(self, images: list[str]) -> None:
        if self.image_store is None:
            return
        for file_name in images:
            self.image_store.discard(file_name)
