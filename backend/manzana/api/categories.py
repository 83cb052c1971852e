from fastapi import APIRouter, Depends
from sqlmodel import Session, select
from typing import List
from manzana.api.deps import get_db
from manzana.models.category import Category
from manzana.schemas.category import CategoryResponse

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("/", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    """Active categories"""
    stmt = select(Category).where(Category.is_active == True).order_by(Category.sort_order)
    return db.exec(stmt).all()
