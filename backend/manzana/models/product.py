from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from decimal import Decimal
from .promotion import utcnow

if TYPE_CHECKING:
    from .category import Category


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    slug: str = Field(unique=True, index=True)
    description: Optional[str] = None

    price: Decimal = Field(max_digits=10, decimal_places=2)
    # Manual markdown set by an operator; the baseline promotions discount from
    discounted_price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)

    in_stock: bool = Field(default=True)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id")

    is_active: bool = Field(default=True)
    is_featured: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    # Relationships
    category: Optional["Category"] = Relationship(back_populates="products")
