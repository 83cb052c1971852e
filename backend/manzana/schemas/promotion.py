from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, timezone
from decimal import Decimal
from manzana.models.promotion import PromotionType, PromotionScope, UserType
from manzana.services.promotion_display import TimeRemaining


NOT_NULL_FIELDS = (
    "title", "promotion_type", "discount_value", "applicable_to", "applicable_ids",
    "start_date", "end_date", "is_featured", "is_active",
)


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PromotionResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    code: Optional[str] = None
    promotion_type: PromotionType
    discount_value: Decimal
    buy_quantity: Optional[int] = None
    get_quantity: Optional[int] = None
    min_purchase_amount: Optional[Decimal] = None
    terms_and_conditions: Optional[str] = None
    applicable_to: PromotionScope
    applicable_ids: List[str] = []
    user_type_restriction: Optional[UserType] = None
    start_date: datetime
    end_date: datetime
    usage_limit: Optional[int] = None
    usage_count: int
    is_featured: bool
    is_active: bool

    class Config:
        from_attributes = True


class ActivePromotionResponse(PromotionResponse):
    """Promotion with storefront display data"""
    badge_text: str
    time_remaining: TimeRemaining
    is_ending_soon: bool
    is_new: bool


class AppliedPromotion(BaseModel):
    id: int
    title: str
    promotion_type: PromotionType
    discount_value: Decimal
    badge_text: str
    end_date: datetime


class PromotionCreate(BaseModel):
    title: str
    description: Optional[str] = None
    code: Optional[str] = None
    promotion_type: PromotionType
    discount_value: Decimal = Field(default=Decimal("0"), ge=0, allow_inf_nan=False)
    buy_quantity: Optional[int] = Field(default=None, ge=1)
    get_quantity: Optional[int] = Field(default=None, ge=1)
    min_purchase_amount: Optional[Decimal] = Field(default=None, ge=0, allow_inf_nan=False)
    terms_and_conditions: Optional[str] = None
    applicable_to: PromotionScope = PromotionScope.ALL
    applicable_ids: List[str] = []
    user_type_restriction: Optional[UserType] = None
    start_date: datetime
    end_date: datetime
    usage_limit: Optional[int] = Field(default=None, ge=0)
    is_featured: bool = False
    is_active: bool = True

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_in_utc(cls, value):
        return _to_utc(value)

    @field_validator("applicable_ids", mode="before")
    @classmethod
    def ids_as_strings(cls, value):
        return [str(v) for v in value] if value is not None else []

    @model_validator(mode="after")
    def check_values(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        if self.promotion_type == PromotionType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("percentage discount_value must be between 0 and 100")
        return self


class PromotionUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    code: Optional[str] = None
    promotion_type: Optional[PromotionType] = None
    discount_value: Optional[Decimal] = Field(default=None, ge=0, allow_inf_nan=False)
    buy_quantity: Optional[int] = Field(default=None, ge=1)
    get_quantity: Optional[int] = Field(default=None, ge=1)
    min_purchase_amount: Optional[Decimal] = Field(default=None, ge=0, allow_inf_nan=False)
    terms_and_conditions: Optional[str] = None
    applicable_to: Optional[PromotionScope] = None
    applicable_ids: Optional[List[str]] = None
    user_type_restriction: Optional[UserType] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    usage_limit: Optional[int] = Field(default=None, ge=0)
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_in_utc(cls, value):
        return _to_utc(value)

    @field_validator("applicable_ids", mode="before")
    @classmethod
    def ids_as_strings(cls, value):
        return [str(v) for v in value] if value is not None else None

    @model_validator(mode="after")
    def check_not_null(self):
        for name in NOT_NULL_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
