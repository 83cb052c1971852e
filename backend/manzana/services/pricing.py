from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Sequence, Tuple
from manzana.models.promotion import PromotionType, PromotionScope


ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class PriceResolution:
    original_price: Decimal
    discounted_price: Optional[Decimal]
    promotion_price: Optional[Decimal]
    final_price: Decimal
    applied_promotion: Optional[Any]
    savings_amount: Decimal
    savings_percentage: Decimal


@dataclass(frozen=True)
class PriceSummary:
    """Storefront view of a product price"""
    original_price: Decimal
    final_price: Decimal
    has_discount: bool
    has_promotion: bool
    applied_promotion: Optional[Any]


@dataclass
class CartTotals:
    subtotal: Decimal = ZERO
    original_total: Decimal = ZERO
    total_discount: Decimal = ZERO
    total_promotion_discount: Decimal = ZERO
    applied_promotions: List[Any] = field(default_factory=list)


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def as_utc(value) -> Optional[datetime]:
    """Parse ISO strings and treat naive datetimes as UTC"""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def resolve_now(now: Optional[datetime]) -> datetime:
    return as_utc(now) if now is not None else datetime.now(timezone.utc)


def enum_value(value) -> str:
    return value.value if hasattr(value, "value") else value


def is_promotion_applicable(product, promotion, now: Optional[datetime] = None) -> bool:
    """Active flag, inclusive date window and scope match"""
    if not promotion.is_active:
        return False

    now = resolve_now(now)
    start = as_utc(promotion.start_date)
    end = as_utc(promotion.end_date)
    if start is not None and now < start:
        return False
    if end is not None and now > end:
        return False

    scope = enum_value(promotion.applicable_to)
    ids = {str(i) for i in (promotion.applicable_ids or [])}

    if scope == PromotionScope.ALL.value:
        return True
    if scope == PromotionScope.PRODUCT.value:
        return product.id is not None and str(product.id) in ids
    if scope == PromotionScope.CATEGORY.value:
        return product.category_id is not None and str(product.category_id) in ids
    # user_type and unknown scopes are filtered by the caller
    return False


def get_applicable_promotions(product, promotions: Iterable, now: Optional[datetime] = None) -> list:
    now = resolve_now(now)
    return [p for p in promotions if is_promotion_applicable(product, p, now)]


def calculate_discount(current_price: Decimal, promotion) -> Decimal:
    """Discount amount a promotion takes off current_price"""
    promotion_type = enum_value(promotion.promotion_type)
    value = to_decimal(promotion.discount_value or 0)

    if promotion_type == PromotionType.PERCENTAGE.value:
        return current_price * (value / HUNDRED)
    if promotion_type == PromotionType.FIXED_AMOUNT.value:
        return value
    return ZERO


def select_best_promotion(current_price: Decimal, promotions: Iterable) -> Tuple[Optional[Any], Decimal]:
    """
    Pick the promotion with the largest discount.
    Exact ties keep the first one seen; a discount <= 0 never wins.
    """
    best = None
    best_discount = ZERO

    for promo in promotions:
        discount = calculate_discount(current_price, promo)
        if discount > best_discount:
            best_discount = discount
            best = promo

    return best, best_discount


def resolve_price(product, promotions: Iterable, now: Optional[datetime] = None) -> PriceResolution:
    """
    Final selling price of a product.

    Promotions discount the manual markdown (discounted_price) when one is
    set, otherwise the base price. At most one promotion applies. The final
    price is floored at zero but not capped at the base price.
    """
    original_price = to_decimal(product.price)
    discounted_price = (
        to_decimal(product.discounted_price) if product.discounted_price is not None else None
    )
    current_price = discounted_price if discounted_price is not None else original_price

    applicable = get_applicable_promotions(product, promotions, now)
    best, discount = select_best_promotion(current_price, applicable)

    promotion_price = None
    if best is not None:
        promotion_price = max(ZERO, current_price - discount)
        final_price = promotion_price
    else:
        final_price = current_price

    savings_amount = original_price - final_price
    if original_price > 0:
        savings_percentage = savings_amount / original_price * HUNDRED
    else:
        savings_percentage = ZERO

    return PriceResolution(
        original_price=original_price,
        discounted_price=discounted_price,
        promotion_price=promotion_price,
        final_price=final_price,
        applied_promotion=best,
        savings_amount=savings_amount,
        savings_percentage=savings_percentage,
    )


def summarize_price(product, promotions: Iterable, now: Optional[datetime] = None) -> PriceSummary:
    """Lowest of base price, markdown and promotion price"""
    resolution = resolve_price(product, promotions, now)

    final_price = resolution.original_price
    has_discount = False
    has_promotion = False
    applied_promotion = None

    if resolution.discounted_price is not None and resolution.discounted_price < final_price:
        final_price = resolution.discounted_price
        has_discount = True

    if resolution.promotion_price is not None and resolution.promotion_price < final_price:
        final_price = resolution.promotion_price
        has_promotion = True
        has_discount = False
        applied_promotion = resolution.applied_promotion

    return PriceSummary(
        original_price=resolution.original_price,
        final_price=final_price,
        has_discount=has_discount,
        has_promotion=has_promotion,
        applied_promotion=applied_promotion,
    )


def calculate_cart_total(
    lines: Sequence[Tuple[Any, int]],
    promotions: Sequence,
    now: Optional[datetime] = None,
) -> CartTotals:
    """Totals for (product, quantity) lines with promotions applied"""
    now = resolve_now(now)
    totals = CartTotals()
    seen = set()

    for product, quantity in lines:
        if product is None:
            continue

        summary = summarize_price(product, promotions, now)
        qty = Decimal(quantity)
        line_saving = (summary.original_price - summary.final_price) * qty

        totals.subtotal += summary.final_price * qty
        totals.original_total += summary.original_price * qty
        totals.total_discount += line_saving

        promo = summary.applied_promotion
        if summary.has_promotion and promo is not None:
            totals.total_promotion_discount += line_saving
            key = promo.id if promo.id is not None else id(promo)
            if key not in seen:
                seen.add(key)
                totals.applied_promotions.append(promo)

    return totals
