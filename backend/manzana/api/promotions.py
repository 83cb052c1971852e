import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from typing import List, Optional
from datetime import datetime, timezone
from manzana.api.deps import get_db, admin_required, get_current_user_optional, CurrentUser
from manzana.models.promotion import Promotion, PromotionType, utcnow
from manzana.schemas.promotion import (
    PromotionResponse,
    ActivePromotionResponse,
    PromotionCreate,
    PromotionUpdate,
)
from manzana.services.catalog import build_active_promotion_response
from manzana.services.pricing import as_utc, enum_value
from manzana.services.promotions import get_active_promotions, restrict_to_user_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/promotions", tags=["promotions"])


def _ensure_unique_code(db: Session, code: Optional[str], exclude_id: Optional[int] = None):
    if not code:
        return
    stmt = select(Promotion).where(Promotion.code == code)
    if exclude_id is not None:
        stmt = stmt.where(Promotion.id != exclude_id)
    if db.exec(stmt).first():
        raise HTTPException(status_code=400, detail="Promotion code already exists")


# === Public ===

@router.get("/active", response_model=List[ActivePromotionResponse])
def list_active_promotions(
    db: Session = Depends(get_db),
    user: Optional[CurrentUser] = Depends(get_current_user_optional),
):
    """Active promotions with badge and countdown"""
    now = datetime.now(timezone.utc)
    promotions = restrict_to_user_type(get_active_promotions(db, now), user.user_type if user else None)
    return [build_active_promotion_response(p, now) for p in promotions]


@router.get("/featured", response_model=List[ActivePromotionResponse])
def list_featured_promotions(
    db: Session = Depends(get_db),
    user: Optional[CurrentUser] = Depends(get_current_user_optional),
):
    now = datetime.now(timezone.utc)
    promotions = restrict_to_user_type(get_active_promotions(db, now), user.user_type if user else None)
    return [build_active_promotion_response(p, now) for p in promotions if p.is_featured]


# === Admin CRUD ===

@router.get("/", response_model=List[PromotionResponse])
def list_promotions(
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(admin_required)
):
    """All promotions (admin)"""
    stmt = select(Promotion).order_by(Promotion.id.desc()).offset(skip).limit(limit)
    return db.exec(stmt).all()


@router.get("/{promotion_id}", response_model=PromotionResponse)
def get_promotion(
    promotion_id: int,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(admin_required)
):
    promo = db.get(Promotion, promotion_id)
    if not promo:
        raise HTTPException(status_code=404, detail="Promotion not found")
    return promo


@router.post("/", response_model=PromotionResponse, status_code=201)
def create_promotion(
    data: PromotionCreate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(admin_required)
):
    _ensure_unique_code(db, data.code)

    promo = Promotion(**data.model_dump())
    db.add(promo)
    db.commit()
    db.refresh(promo)
    logger.info("Promotion %s created by %s", promo.id, admin.id)
    return promo


@router.patch("/{promotion_id}", response_model=PromotionResponse)
def update_promotion(
    promotion_id: int,
    data: PromotionUpdate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(admin_required)
):
    promo = db.get(Promotion, promotion_id)
    if not promo:
        raise HTTPException(status_code=404, detail="Promotion not found")

    update_data = data.model_dump(exclude_unset=True)
    _ensure_unique_code(db, update_data.get("code"), exclude_id=promotion_id)

    start = as_utc(update_data.get("start_date", promo.start_date))
    end = as_utc(update_data.get("end_date", promo.end_date))
    if end < start:
        raise HTTPException(status_code=400, detail="end_date must not precede start_date")

    promotion_type = enum_value(update_data.get("promotion_type", promo.promotion_type))
    discount_value = update_data.get("discount_value", promo.discount_value)
    if promotion_type == PromotionType.PERCENTAGE.value and discount_value > 100:
        raise HTTPException(
            status_code=400,
            detail="percentage discount_value must be between 0 and 100"
        )

    for key, value in update_data.items():
        setattr(promo, key, value)
    promo.updated_at = utcnow()

    db.add(promo)
    db.commit()
    db.refresh(promo)
    logger.info("Promotion %s updated by %s: %s", promo.id, admin.id, sorted(update_data))
    return promo


@router.delete("/{promotion_id}")
def delete_promotion(
    promotion_id: int,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(admin_required)
):
    promo = db.get(Promotion, promotion_id)
    if not promo:
        raise HTTPException(status_code=404, detail="Promotion not found")

    db.delete(promo)
    db.commit()
    logger.info("Promotion %s deleted by %s", promotion_id, admin.id)
    return {"message": "Promotion deleted"}
