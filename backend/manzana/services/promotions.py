import logging
from decimal import Decimal
from datetime import datetime
from typing import List, Optional
from sqlmodel import Session, select
from manzana.models.promotion import Promotion
from manzana.services.pricing import resolve_now, enum_value

logger = logging.getLogger(__name__)


def sanitize_promotion(promo: Promotion) -> Promotion:
    """Non-finite discount values have no effect on price"""
    value = promo.discount_value
    if value is not None and not Decimal(str(value)).is_finite():
        logger.warning("Promotion %s has non-finite discount_value %r, treating as 0", promo.id, value)
        promo.discount_value = Decimal("0")
    return promo


def get_active_promotions(db: Session, now: Optional[datetime] = None) -> List[Promotion]:
    """Active promotions whose date window contains now"""
    now = resolve_now(now)

    stmt = select(Promotion).where(
        Promotion.is_active == True,
        Promotion.start_date <= now,
        Promotion.end_date >= now,
    ).order_by(Promotion.created_at, Promotion.id)

    return [sanitize_promotion(p) for p in db.exec(stmt).all()]


def restrict_to_user_type(promotions: List[Promotion], user_type: Optional[str]) -> List[Promotion]:
    """Drop promotions restricted to another kind of customer"""
    result = []
    for promo in promotions:
        restriction = promo.user_type_restriction
        if restriction is None or enum_value(restriction) == user_type:
            result.append(promo)
    return result
