from pydantic import BaseModel, Field
from typing import List
from decimal import Decimal
from manzana.schemas.promotion import AppliedPromotion


class CartItemIn(BaseModel):
    product_id: int
    quantity: int = Field(ge=1, le=999)


class CartQuoteRequest(BaseModel):
    items: List[CartItemIn] = Field(min_length=1)


class CartLineResponse(BaseModel):
    product_id: int
    name: str
    quantity: int
    unit_price: Decimal
    final_price: Decimal
    line_total: Decimal
    has_promotion: bool


class CartQuoteResponse(BaseModel):
    items: List[CartLineResponse]
    subtotal: Decimal
    original_total: Decimal
    total_discount: Decimal
    total_promotion_discount: Decimal
    applied_promotions: List[AppliedPromotion]
