from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from .promotion import utcnow

if TYPE_CHECKING:
    from .product import Product


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    slug: str = Field(unique=True, index=True)
    description: Optional[str] = None

    sort_order: int = Field(default=0)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow)

    # Relationships
    products: List["Product"] = Relationship(back_populates="category")
