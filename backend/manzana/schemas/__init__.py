from .category import CategoryResponse
from .product import ProductResponse, ProductListResponse, ProductDetailResponse
from .promotion import PromotionResponse, ActivePromotionResponse, AppliedPromotion
from .cart import CartQuoteRequest, CartQuoteResponse

__all__ = [
    "CategoryResponse",
    "ProductResponse", "ProductListResponse", "ProductDetailResponse",
    "PromotionResponse", "ActivePromotionResponse", "AppliedPromotion",
    "CartQuoteRequest", "CartQuoteResponse",
]
