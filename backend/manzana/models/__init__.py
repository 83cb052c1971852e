from .category import Category
from .product import Product
from .promotion import Promotion, PromotionType, PromotionScope, UserType

__all__ = [
    "Category",
    "Product",
    "Promotion", "PromotionType", "PromotionScope", "UserType",
]
