from sqlmodel import SQLModel, Field, Column, JSON
from typing import Optional, List
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PromotionType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    BUY_X_GET_Y = "buy_x_get_y"
    FREE_SHIPPING = "free_shipping"
    CUSTOM = "custom"


class PromotionScope(str, Enum):
    ALL = "all"
    CATEGORY = "category"
    PRODUCT = "product"
    USER_TYPE = "user_type"


class UserType(str, Enum):
    CONSUMER = "consumer"
    RESELLER = "reseller"


class Promotion(SQLModel, table=True):
    __tablename__ = "promotions"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: Optional[str] = None
    code: Optional[str] = Field(default=None, unique=True, index=True)

    promotion_type: PromotionType
    # Percent (0-100) or a currency amount, depending on promotion_type
    discount_value: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    buy_quantity: Optional[int] = None
    get_quantity: Optional[int] = None
    min_purchase_amount: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    terms_and_conditions: Optional[str] = None

    applicable_to: PromotionScope = Field(default=PromotionScope.ALL)
    # Category ids, product ids or user types
    applicable_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    user_type_restriction: Optional[UserType] = None

    start_date: datetime = Field(index=True)
    end_date: datetime = Field(index=True)

    usage_limit: Optional[int] = None
    usage_count: int = Field(default=0)

    is_featured: bool = Field(default=False)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
