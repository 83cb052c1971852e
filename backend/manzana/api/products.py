from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select, col
from typing import Optional, Literal
from datetime import datetime, timezone
from decimal import Decimal
from math import ceil
from manzana.api.deps import get_db, get_current_user_optional, CurrentUser
from manzana.models.product import Product
from manzana.schemas.product import ProductListResponse, ProductDetailResponse
from manzana.services.catalog import build_product_response, build_product_detail_response
from manzana.services.pricing import summarize_price
from manzana.services.promotions import get_active_promotions, restrict_to_user_type

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("/", response_model=ProductListResponse)
def list_products(
    q: Optional[str] = Query(None, description="Search query"),
    category_id: Optional[int] = Query(None),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    in_stock: Optional[bool] = Query(None),
    on_sale: Optional[bool] = Query(None),
    sort: Literal["price_asc", "price_desc", "newest", "name"] = Query("newest"),
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    db: Session = Depends(get_db),
    user: Optional[CurrentUser] = Depends(get_current_user_optional),
):
    """Active products with resolved prices"""
    stmt = select(Product).where(Product.is_active == True)

    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)

    if q:
        search = f"%{q}%"
        stmt = stmt.where(
            (col(Product.name).ilike(search)) |
            (col(Product.description).ilike(search))
        )

    if in_stock is True:
        stmt = stmt.where(Product.in_stock == True)

    if sort == "name":
        stmt = stmt.order_by(Product.name.asc())
    else:
        stmt = stmt.order_by(Product.created_at.desc(), Product.id.desc())

    now = datetime.now(timezone.utc)
    promotions = restrict_to_user_type(get_active_promotions(db, now), user.user_type if user else None)

    # Price filters and price sorting work on the price the cart charges
    priced = [(p, summarize_price(p, promotions, now)) for p in db.exec(stmt).all()]

    if min_price is not None:
        priced = [(p, r) for p, r in priced if r.final_price >= min_price]
    if max_price is not None:
        priced = [(p, r) for p, r in priced if r.final_price <= max_price]
    if on_sale is True:
        priced = [(p, r) for p, r in priced if r.final_price < r.original_price]

    if sort == "price_asc":
        priced.sort(key=lambda pr: pr[1].final_price)
    elif sort == "price_desc":
        priced.sort(key=lambda pr: pr[1].final_price, reverse=True)

    total = len(priced)

    # Pagination
    offset = (page - 1) * page_size
    items = [
        build_product_response(p, promotions, now, summary=r)
        for p, r in priced[offset:offset + page_size]
    ]

    return ProductListResponse(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
        pages=ceil(total / page_size) if total > 0 else 1,
    )


@router.get("/{slug}", response_model=ProductDetailResponse)
def get_product(
    slug: str,
    db: Session = Depends(get_db),
    user: Optional[CurrentUser] = Depends(get_current_user_optional),
):
    product = db.exec(
        select(Product).where(Product.slug == slug, Product.is_active == True)
    ).first()

    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    now = datetime.now(timezone.utc)
    promotions = restrict_to_user_type(get_active_promotions(db, now), user.user_type if user else None)
    return build_product_detail_response(product, promotions, now)
