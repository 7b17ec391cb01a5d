from .base import Base, is_object_id, new_object_id
from .category import Category
from .product import MUTABLE_FIELDS as PRODUCT_MUTABLE_FIELDS
from .product import Product
from .user import User

__all__ = [
    "Base",
    "Category",
    "PRODUCT_MUTABLE_FIELDS",
    "Product",
    "User",
    "is_object_id",
    "new_object_id",
]
