from .category import CategoryCreate, CategoryRead
from .common import HealthStatus
from .product import ProductCreate, ProductFields, ProductRead, ProductUpdate
from .user import LoginResponse, UserLogin, UsernameRead, UserRead, UserRegister

__all__ = [
    "CategoryCreate",
    "CategoryRead",
    "HealthStatus",
    "LoginResponse",
    "ProductCreate",
    "ProductFields",
    "ProductRead",
    "ProductUpdate",
    "UserLogin",
    "UserRead",
    "UserRegister",
    "UsernameRead",
]
