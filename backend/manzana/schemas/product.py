from pydantic import BaseModel
from typing import Optional, List
from decimal import Decimal
from manzana.schemas.promotion import AppliedPromotion


class ProductResponse(BaseModel):
    """Product card in listings"""
    id: int
    name: str
    slug: str

    price: Decimal
    discounted_price: Optional[Decimal] = None
    final_price: Decimal
    savings_amount: Decimal
    savings_percentage: Decimal
    has_discount: bool
    has_promotion: bool
    promotion: Optional[AppliedPromotion] = None

    in_stock: bool
    is_featured: bool

    category_id: Optional[int] = None
    category_name: Optional[str] = None


class ProductDetailResponse(ProductResponse):
    description: Optional[str] = None
    promotion_price: Optional[Decimal] = None


class ProductListResponse(BaseModel):
    items: List[ProductResponse]
    total: int
    page: int
    page_size: int
    pages: int
