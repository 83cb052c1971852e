from datetime import datetime
from typing import List, Optional
from manzana.core.config import settings
from manzana.models.product import Product
from manzana.models.promotion import Promotion
from manzana.schemas.promotion import AppliedPromotion, ActivePromotionResponse, PromotionResponse
from manzana.services.pricing import resolve_price, summarize_price, round_money, PriceSummary, HUNDRED, ZERO
from manzana.services.promotion_display import badge_text, time_remaining, is_ending_soon, is_new


def build_applied_promotion(promo: Optional[Promotion]) -> Optional[AppliedPromotion]:
    if promo is None:
        return None
    return AppliedPromotion(
        id=promo.id,
        title=promo.title,
        promotion_type=promo.promotion_type,
        discount_value=promo.discount_value,
        badge_text=badge_text(promo, settings.CURRENCY_SYMBOL),
        end_date=promo.end_date,
    )


def _price_fields(product: Product, summary: PriceSummary) -> dict:
    # Same price the cart quote charges
    savings_amount = summary.original_price - summary.final_price
    if summary.original_price > 0:
        savings_percentage = savings_amount / summary.original_price * HUNDRED
    else:
        savings_percentage = ZERO

    return {
        "price": round_money(summary.original_price),
        "discounted_price": (
            round_money(product.discounted_price) if product.discounted_price is not None else None
        ),
        "final_price": round_money(summary.final_price),
        "savings_amount": round_money(savings_amount),
        "savings_percentage": round_money(savings_percentage),
        "has_discount": summary.has_discount,
        "has_promotion": summary.has_promotion,
        "promotion": build_applied_promotion(summary.applied_promotion),
    }


def build_product_response(
    product: Product,
    promotions: List[Promotion],
    now: Optional[datetime] = None,
    summary: Optional[PriceSummary] = None,
) -> dict:
    """Product card with the price the cart charges"""
    if summary is None:
        summary = summarize_price(product, promotions, now)

    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        **_price_fields(product, summary),
        "in_stock": product.in_stock,
        "is_featured": product.is_featured,
        "category_id": product.category_id,
        "category_name": product.category.name if product.category else None,
    }


def build_product_detail_response(
    product: Product,
    promotions: List[Promotion],
    now: Optional[datetime] = None,
) -> dict:
    base = build_product_response(product, promotions, now)
    resolution = resolve_price(product, promotions, now)

    base.update({
        "description": product.description,
        "promotion_price": (
            round_money(resolution.promotion_price)
            if base["has_promotion"] and resolution.promotion_price is not None else None
        ),
    })

    return base


def build_active_promotion_response(promo: Promotion, now: Optional[datetime] = None) -> ActivePromotionResponse:
    data = PromotionResponse.model_validate(promo).model_dump()
    return ActivePromotionResponse(
        **data,
        badge_text=badge_text(promo, settings.CURRENCY_SYMBOL),
        time_remaining=time_remaining(promo.end_date, now),
        is_ending_soon=is_ending_soon(promo.end_date, now),
        is_new=is_new(promo.start_date, now),
    )
