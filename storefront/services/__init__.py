from .category_service import CategoryService
from .product_repository import ProductRepository
from .product_service import ProductService
from .user_service import UserService

__all__ = [
    "CategoryService",
    "ProductRepository",
    "ProductService",
    "UserService",
]
