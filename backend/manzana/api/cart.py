import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select, col
from typing import Optional
from datetime import datetime, timezone
from manzana.api.deps import get_db, get_current_user_optional, CurrentUser
from manzana.models.product import Product
from manzana.schemas.cart import CartQuoteRequest, CartQuoteResponse
from manzana.services.catalog import build_applied_promotion
from manzana.services.pricing import calculate_cart_total, summarize_price, round_money
from manzana.services.promotions import get_active_promotions, restrict_to_user_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.post("/quote", response_model=CartQuoteResponse)
def quote_cart(
    data: CartQuoteRequest,
    db: Session = Depends(get_db),
    user: Optional[CurrentUser] = Depends(get_current_user_optional),
):
    """Price a cart with active promotions applied"""
    ids = {item.product_id for item in data.items}
    products = {
        p.id: p for p in db.exec(select(Product).where(col(Product.id).in_(ids))).all()
    }

    lines = []
    for item in data.items:
        product = products.get(item.product_id)
        if not product or not product.is_active:
            logger.info("Cart quote rejected: product %s unavailable", item.product_id)
            raise HTTPException(status_code=400, detail=f"Product {item.product_id} not found")
        if not product.in_stock:
            raise HTTPException(status_code=400, detail=f"Product {product.name} is out of stock")
        lines.append((product, item.quantity))

    now = datetime.now(timezone.utc)
    promotions = restrict_to_user_type(get_active_promotions(db, now), user.user_type if user else None)
    totals = calculate_cart_total(lines, promotions, now)

    items = []
    for product, quantity in lines:
        summary = summarize_price(product, promotions, now)
        items.append({
            "product_id": product.id,
            "name": product.name,
            "quantity": quantity,
            "unit_price": round_money(summary.original_price),
            "final_price": round_money(summary.final_price),
            "line_total": round_money(summary.final_price * quantity),
            "has_promotion": summary.has_promotion,
        })

    return CartQuoteResponse(
        items=items,
        subtotal=round_money(totals.subtotal),
        original_total=round_money(totals.original_total),
        total_discount=round_money(totals.total_discount),
        total_promotion_discount=round_money(totals.total_promotion_discount),
        applied_promotions=[build_applied_promotion(p) for p in totals.applied_promotions],
    )
